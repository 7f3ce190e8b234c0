from datetime import datetime, timezone

from pydantic import BaseModel, Field

TASK_TYPES = ("feature", "bug", "refactor", "documentation")


class Task(BaseModel):
    id: str
    title: str
    description: str
    task_type: str = Field(default="feature", examples=list(TASK_TYPES))
    estimated_points: int = Field(..., description="rule-based estimate at save time")
    final_points: int = Field(..., description="points the user settled on; the ML training label")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    ml_estimated_points: int | None = None
    ai_estimated_points: int | None = None
    ai_model: str | None = None
    bert_estimated_points: int | None = None
    bert_confidence: float | None = None


class ModelStats(BaseModel):
    trained_on: int = 0
    last_trained_at: datetime | None = None
    accuracy: float | None = Field(default=None, ge=0, le=1)
