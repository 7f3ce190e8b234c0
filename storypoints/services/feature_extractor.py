from __future__ import annotations

import re
from typing import Iterable

from storypoints.schemas.keyword_taxonomy import KeywordTaxonomy
from storypoints.schemas.task import TASK_TYPES
from storypoints.services.estimator import STORY_POINT_SCALE
from storypoints.services.keywords import DEFAULT_TAXONOMY

FEATURE_COUNT = 13

MAX_DESCRIPTION_CHARS = 1000
MAX_WORDS = 100
COMPLEXITY_COUNT_CAP = 5
SCOPE_COUNT_CAP = 3
DEPENDENCY_COUNT_CAP = 3

_whitespace = re.compile(r"\s+")


def _occurrences(text: str, keywords: Iterable[str]) -> int:
    # Every occurrence counts here, unlike the scorer which only checks presence.
    return sum(text.count(kw) for kw in keywords)


def _ratio(value: float, cap: float) -> float:
    return min(1.0, value / cap)


def extract_features(
    description: str,
    task_type: str,
    taxonomy: KeywordTaxonomy = DEFAULT_TAXONOMY,
) -> list[float]:
    """Encode a task as 13 values in [0, 1] for the local classifier.

    Order: one-hot task type (feature, bug, refactor, documentation),
    description length, complexity high/medium/low counts, scope
    large/medium/small counts, dependency count, word count.
    """
    lower_desc = description.lower()

    features = [1.0 if task_type == known else 0.0 for known in TASK_TYPES]
    features.append(_ratio(len(description), MAX_DESCRIPTION_CHARS))

    for tier in (taxonomy.complexity.high, taxonomy.complexity.medium, taxonomy.complexity.low):
        features.append(_ratio(_occurrences(lower_desc, tier), COMPLEXITY_COUNT_CAP))

    for tier in (taxonomy.scope.large, taxonomy.scope.medium, taxonomy.scope.small):
        features.append(_ratio(_occurrences(lower_desc, tier), SCOPE_COUNT_CAP))

    features.append(_ratio(_occurrences(lower_desc, taxonomy.dependency), DEPENDENCY_COUNT_CAP))

    word_count = len(_whitespace.split(description))
    features.append(_ratio(word_count, MAX_WORDS))

    return features


def points_to_index(points: int) -> int:
    try:
        return STORY_POINT_SCALE.index(points)
    except ValueError:
        raise ValueError(f"{points} is not a story point value; expected one of {STORY_POINT_SCALE}") from None


def index_to_points(index: int) -> int:
    return STORY_POINT_SCALE[max(0, min(len(STORY_POINT_SCALE) - 1, index))]
