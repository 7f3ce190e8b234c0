from __future__ import annotations

import pytest
from pydantic import ValidationError

from storypoints.schemas.keyword_taxonomy import ComplexityKeywords, KeywordTaxonomy
from storypoints.services.keywords import DEFAULT_TAXONOMY


def test_keywords_are_trimmed_and_lowercased() -> None:
    taxonomy = KeywordTaxonomy(complexity=ComplexityKeywords(high=["  Kernel ", "DMA"]), dependency=[" API "])
    assert taxonomy.complexity.high == ("kernel", "dma")
    assert taxonomy.dependency == ("api",)


def test_blank_keyword_is_rejected() -> None:
    with pytest.raises(ValidationError):
        KeywordTaxonomy(dependency=["api", "   "])


def test_taxonomy_is_immutable() -> None:
    with pytest.raises(ValidationError):
        DEFAULT_TAXONOMY.dependency = ("x",)


def test_missing_tiers_default_to_empty() -> None:
    taxonomy = KeywordTaxonomy.model_validate({"complexity": {"high": ["x"]}})
    assert taxonomy.complexity.medium == ()
    assert taxonomy.scope.large == ()
    assert taxonomy.dependency == ()


def test_default_vocabulary_overlaps() -> None:
    assert "api" in DEFAULT_TAXONOMY.complexity.medium
    assert "api" in DEFAULT_TAXONOMY.scope.medium
    assert "api" in DEFAULT_TAXONOMY.dependency
    assert "atualizar" in DEFAULT_TAXONOMY.complexity.medium
    assert "atualizar" in DEFAULT_TAXONOMY.complexity.low


def test_json_round_trip() -> None:
    assert KeywordTaxonomy.model_validate_json(DEFAULT_TAXONOMY.model_dump_json()) == DEFAULT_TAXONOMY
