"""Rule-based story point estimation.

A task description is scanned for taxonomy keywords (plain substring
containment on the lowercased text), the per-tier weights are summed with a
task-type base score and a length bonus, and the result is clamped to
[1, 21] and snapped to the nearest value of the story point scale.

``estimate`` and ``explain`` share ``score_task`` so the number a user sees
and the breakdown that justifies it always agree.
"""
from __future__ import annotations

from typing import Iterable

from storypoints.schemas.keyword_taxonomy import KeywordTaxonomy
from storypoints.schemas.score_breakdown import (
    ComplexityDetails,
    DependencyDetails,
    FibonacciMapping,
    LengthDetails,
    ScopeDetails,
    ScoreBreakdown,
)
from storypoints.services.keywords import DEFAULT_TAXONOMY

STORY_POINT_SCALE: tuple[int, ...] = (1, 2, 3, 5, 8, 13, 21)

MIN_SCORE = 1
MAX_SCORE = 21
CHARS_PER_LENGTH_POINT = 200
MAX_LENGTH_SCORE = 3

DEFAULT_BASE = (2, "Default score for unspecified task types")
BASE_POINTS: dict[str, tuple[int, str]] = {
    "feature": (3, "New features usually require significant development"),
    "bug": (2, "Bug fixes are typically less complex than new features"),
    "refactor": (3, "Refactors need careful analysis and can touch many parts of the code"),
    "documentation": (1, "Documentation matters but is usually less technically complex"),
}

COMPLEXITY_WEIGHTS = {"high": 2, "medium": 1, "low": -1}
SCOPE_WEIGHTS = {"large": 2, "medium": 1, "small": -1}
DEPENDENCY_WEIGHT = 1


def snap_to_scale(score: int) -> int:
    """Return the scale value nearest to ``score``.

    The scan runs in ascending order and only replaces the incumbent on a
    strictly smaller distance, so a tie resolves to the lower value (4 -> 3).
    """
    closest = STORY_POINT_SCALE[0]
    min_diff = abs(closest - score)
    for point in STORY_POINT_SCALE[1:]:
        diff = abs(point - score)
        if diff < min_diff:
            min_diff = diff
            closest = point
    return closest


def base_points_for(task_type: str) -> tuple[int, str]:
    return BASE_POINTS.get(task_type, DEFAULT_BASE)


def matching_keywords(text: str, keywords: Iterable[str]) -> list[str]:
    """Keywords contained anywhere in ``text``, in taxonomy order, each listed once."""
    return [kw for kw in keywords if kw in text]


def length_score_for(description: str) -> int:
    return min(MAX_LENGTH_SCORE, len(description) // CHARS_PER_LENGTH_POINT)


def _mapping_reason(clamped: int, final: int) -> str:
    if clamped == final:
        return "Exact match: the score is already on the story point scale"
    return f"Mapped to the nearest story point value (difference: {abs(clamped - final)})"


def score_task(
    description: str,
    task_type: str,
    taxonomy: KeywordTaxonomy = DEFAULT_TAXONOMY,
) -> ScoreBreakdown:
    lower_desc = description.lower()

    base_points, base_reason = base_points_for(task_type)

    complexity = ComplexityDetails(
        high=matching_keywords(lower_desc, taxonomy.complexity.high),
        medium=matching_keywords(lower_desc, taxonomy.complexity.medium),
        low=matching_keywords(lower_desc, taxonomy.complexity.low),
    )
    complexity.score = sum(
        COMPLEXITY_WEIGHTS[tier] * len(getattr(complexity, tier)) for tier in COMPLEXITY_WEIGHTS
    )

    scope = ScopeDetails(
        large=matching_keywords(lower_desc, taxonomy.scope.large),
        medium=matching_keywords(lower_desc, taxonomy.scope.medium),
        small=matching_keywords(lower_desc, taxonomy.scope.small),
    )
    scope.score = sum(SCOPE_WEIGHTS[tier] * len(getattr(scope, tier)) for tier in SCOPE_WEIGHTS)

    dependency_keywords = matching_keywords(lower_desc, taxonomy.dependency)
    dependency = DependencyDetails(
        keywords=dependency_keywords,
        score=DEPENDENCY_WEIGHT * len(dependency_keywords),
    )

    length = LengthDetails(character_count=len(description), score=length_score_for(description))

    total = base_points + complexity.score + scope.score + dependency.score + length.score
    clamped = max(MIN_SCORE, min(MAX_SCORE, total))
    final = snap_to_scale(clamped)

    return ScoreBreakdown(
        base_points=base_points,
        base_points_reason=base_reason,
        complexity_score=complexity.score,
        complexity_details=complexity,
        scope_score=scope.score,
        scope_details=scope,
        dependency_score=dependency.score,
        dependency_details=dependency,
        length_score=length.score,
        length_details=length,
        total_score=total,
        final_points=final,
        fibonacci_mapping=FibonacciMapping(
            original_score=clamped,
            mapped_to=final,
            reason=_mapping_reason(clamped, final),
        ),
    )


def estimate(description: str, task_type: str, taxonomy: KeywordTaxonomy = DEFAULT_TAXONOMY) -> int:
    """Story points for a task, always a member of ``STORY_POINT_SCALE``."""
    return score_task(description, task_type, taxonomy).final_points


def explain(description: str, task_type: str, taxonomy: KeywordTaxonomy = DEFAULT_TAXONOMY) -> ScoreBreakdown:
    """Same arithmetic as ``estimate``, with the matched keywords of every tier."""
    return score_task(description, task_type, taxonomy)
