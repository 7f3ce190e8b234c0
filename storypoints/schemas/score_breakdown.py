from pydantic import BaseModel, Field


class ComplexityDetails(BaseModel):
    high: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    low: list[str] = Field(default_factory=list)
    score: int = 0


class ScopeDetails(BaseModel):
    large: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    small: list[str] = Field(default_factory=list)
    score: int = 0


class DependencyDetails(BaseModel):
    keywords: list[str] = Field(default_factory=list)
    score: int = 0


class LengthDetails(BaseModel):
    character_count: int
    score: int = Field(..., ge=0, le=3)


class FibonacciMapping(BaseModel):
    original_score: int = Field(..., description="total score after clamping to [1, 21]")
    mapped_to: int
    reason: str


class ScoreBreakdown(BaseModel):
    base_points: int
    base_points_reason: str
    complexity_score: int
    complexity_details: ComplexityDetails
    scope_score: int
    scope_details: ScopeDetails
    dependency_score: int = Field(..., ge=0)
    dependency_details: DependencyDetails
    length_score: int = Field(..., ge=0, le=3)
    length_details: LengthDetails
    total_score: int = Field(..., description="sum of the component scores, before clamping")
    final_points: int
    fibonacci_mapping: FibonacciMapping
