from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field

from storypoints.schemas.readability import ReadabilityLevel, ReadabilityMetrics
from storypoints.schemas.score_breakdown import ScoreBreakdown
from storypoints.services.estimator import STORY_POINT_SCALE

AIModel = Literal["groq", "grok"]


def _on_scale(points: int) -> int:
    if points not in STORY_POINT_SCALE:
        raise ValueError(f"story points must be one of {STORY_POINT_SCALE}")
    return points


StoryPoints = Annotated[int, AfterValidator(_on_scale)]


class TaskText(BaseModel):
    description: str = Field(..., examples=["Criar tela de login com validação de email e senha"])
    task_type: str = Field(default="feature", examples=["feature", "bug", "refactor", "documentation"])


class EstimateRequest(TaskText):
    title: str = Field(..., min_length=1, examples=["Implementar login de usuário"])
    description: str = Field(..., min_length=1)
    ai_model: AIModel | None = None
    use_bert: bool = False


class EstimateResponse(BaseModel):
    request_id: str
    rule_points: int
    ml_points: int | None = None
    ai_points: int | None = None
    ai_model: str | None = None
    ai_note: str | None = None
    ai_error: str | None = None
    bert_points: int | None = None
    bert_confidence: float | None = None
    bert_error: str | None = None
    final_points: int
    final_source: str
    breakdown: ScoreBreakdown
    report_markdown: str | None = None
    errors: list[str] = Field(default_factory=list)


class AIEstimateRequest(TaskText):
    description: str = Field(..., min_length=1)
    task_type: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1, examples=["groq", "grok"])


class BertEstimateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class FeaturesResponse(BaseModel):
    features: list[float]


class SaveTaskRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    task_type: str = "feature"
    final_points: StoryPoints
    ml_estimated_points: int | None = None
    ai_estimated_points: int | None = None
    ai_model: str | None = None
    bert_estimated_points: int | None = None
    bert_confidence: float | None = None


class ImportCSVRequest(BaseModel):
    content: str = Field(..., description="raw CSV text with title, description, type and storyPoints columns")


class ImportCSVResponse(BaseModel):
    imported: int
    total_tasks: int
    model_retrained: bool


class SaveTaskResponse(BaseModel):
    task_id: str
    total_tasks: int
    model_retrained: bool


class TrainResponse(BaseModel):
    trained: bool
    trained_on: int


class ReadabilityRequest(BaseModel):
    text: str


class ReadabilityResponse(BaseModel):
    metrics: ReadabilityMetrics
    reading_ease: ReadabilityLevel
    grade_level: ReadabilityLevel
