from typing import Optional, TypedDict

from storypoints.schemas.keyword_taxonomy import KeywordTaxonomy
from storypoints.schemas.score_breakdown import ScoreBreakdown


class EstimationState(TypedDict, total=False):
    title: str
    description: str
    task_type: str
    ai_model: Optional[str]
    use_bert: bool
    taxonomy: KeywordTaxonomy


    rule_points: int
    breakdown: ScoreBreakdown
    ml_points: Optional[int]
    ai_points: Optional[int]
    ai_note: Optional[str]
    ai_error: Optional[str]
    bert_points: Optional[int]
    bert_confidence: Optional[float]
    bert_error: Optional[str]


    final_points: int
    final_source: str
    report_markdown: str
    errors: Optional[list[str]]
