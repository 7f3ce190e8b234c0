from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _normalize_keywords(values: tuple[str, ...]) -> tuple[str, ...]:
    cleaned: list[str] = []
    for value in values:
        keyword = value.strip().lower()
        if not keyword:
            raise ValueError("keyword entries must not be empty")
        cleaned.append(keyword)
    return tuple(cleaned)


KeywordList = Annotated[tuple[str, ...], AfterValidator(_normalize_keywords)]


class ComplexityKeywords(BaseModel):
    model_config = ConfigDict(frozen=True)

    high: KeywordList = Field(default=(), description="+2 points per matching keyword")
    medium: KeywordList = Field(default=(), description="+1 point per matching keyword")
    low: KeywordList = Field(default=(), description="-1 point per matching keyword")


class ScopeKeywords(BaseModel):
    model_config = ConfigDict(frozen=True)

    large: KeywordList = Field(default=(), description="+2 points per matching keyword")
    medium: KeywordList = Field(default=(), description="+1 point per matching keyword")
    small: KeywordList = Field(default=(), description="-1 point per matching keyword")


class KeywordTaxonomy(BaseModel):
    """Categorized keyword lists that drive the rule-based scorer and the feature extractor."""

    model_config = ConfigDict(frozen=True)

    complexity: ComplexityKeywords = Field(default_factory=ComplexityKeywords)
    scope: ScopeKeywords = Field(default_factory=ScopeKeywords)
    dependency: KeywordList = Field(default=(), description="+1 point per matching keyword")
