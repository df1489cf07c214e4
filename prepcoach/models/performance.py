"""
Performance summary models for PrepCoach

The Performance block is computed once, when a session completes.
"""

from pydantic import BaseModel, Field

from prepcoach.models.evaluation import Score


class PerformanceMetrics(BaseModel):
    """Aggregate counts and timings for a session."""

    total_questions: int = Field(default=0, ge=0)
    answered_questions: int = Field(default=0, ge=0)
    average_time_per_question: int = Field(default=0, ge=0, description="Seconds")
    total_time: int = Field(default=0, ge=0, description="Seconds")


class FeedbackBucket(BaseModel):
    """A labelled group of strengths or weaknesses."""

    category: str
    points: list[str] = Field(default_factory=list)


class RecommendationBucket(BaseModel):
    """A labelled group of action items."""

    category: str
    priority: str = "high"
    recommendations: list[str] = Field(default_factory=list)


class CompanyRecommendation(BaseModel):
    """A company the candidate may be a good fit for."""

    name: str
    reason: str = ""
    match_score: Score = 0


class Performance(BaseModel):
    """Session-level performance summary."""

    overall_score: Score = 0
    category_scores: dict[str, int] = Field(
        default_factory=dict,
        description="Average score per question category that received scored answers"
    )
    metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)

    strengths: list[FeedbackBucket] = Field(default_factory=list)
    weaknesses: list[FeedbackBucket] = Field(default_factory=list)
    recommendations: list[RecommendationBucket] = Field(default_factory=list)

    company_recommendations: list[CompanyRecommendation] = Field(default_factory=list)
