from typing import Any

from pydantic import BaseModel, Field


class AIEstimate(BaseModel):
    points: int
    model: str
    note: str | None = Field(default=None, description="set when the reply was off-scale and a default was used")


class BertPrediction(BaseModel):
    points: int
    confidence: float = Field(..., ge=0, le=1)
    all_predictions: list[dict[str, Any]] = Field(default_factory=list)


class BertModelInfo(BaseModel):
    loaded: bool
    loading: bool
    model_name: str
