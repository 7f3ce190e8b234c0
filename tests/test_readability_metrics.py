from __future__ import annotations

import pytest

from storypoints.schemas.readability import ReadabilityMetrics
from storypoints.services.readability_metrics import (
    calculate_readability_metrics,
    count_sentences,
    count_syllables,
    count_words,
    interpret_flesch_kincaid_grade,
    interpret_flesch_reading_ease,
)


@pytest.mark.parametrize("word, expected", [("o", 1), ("que", 1), ("sistema", 3), ("simples.", 2), ("123", 0)])
def test_count_syllables(word: str, expected: int) -> None:
    assert count_syllables(word) == expected


def test_count_sentences_defaults_to_one() -> None:
    assert count_sentences("sem pontuação") == 1
    assert count_sentences("Uma. Duas! Três?") == 3
    assert count_sentences("Fim...") == 1


def test_count_words() -> None:
    assert count_words("  um   dois\ttrês \n") == 3


def test_short_sentence_metrics() -> None:
    m = calculate_readability_metrics("O sistema é simples.")
    assert m.word_count == 4
    assert m.sentence_count == 1
    assert m.character_count == 17
    assert m.syllable_count == 7
    assert m.difficult_words == 2
    assert m.flesch_reading_ease == pytest.approx(54.725)
    assert m.flesch_kincaid_grade == pytest.approx(6.62)
    assert m.gunning_fog == pytest.approx(0.4 * (4 + 25))


def test_blank_text_is_all_zeros() -> None:
    assert calculate_readability_metrics("   ") == ReadabilityMetrics()


@pytest.mark.parametrize(
    "score, level",
    [(95, "Very easy"), (85, "Easy"), (70, "Fairly easy"), (65, "Standard"),
     (54.7, "Fairly difficult"), (30, "Difficult"), (-10, "Very difficult")],
)
def test_interpret_reading_ease(score: float, level: str) -> None:
    assert interpret_flesch_reading_ease(score).level == level


@pytest.mark.parametrize(
    "grade, level",
    [(3, "Elementary school"), (6.62, "Middle school"), (12, "High school"), (14, "College"), (20, "Postgraduate")],
)
def test_interpret_grade(grade: float, level: str) -> None:
    assert interpret_flesch_kincaid_grade(grade).level == level
