"""
Dashboard analytics models for PrepCoach

Cross-session views over everything an owner has practiced.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from prepcoach.models.evaluation import Score


class ActivityItem(BaseModel):
    """One recent session as shown on the dashboard."""

    session_id: str
    title: str
    date: datetime
    score: Score = 0
    status: str
    interview_type: str


class TrendPoint(BaseModel):
    """Overall score of one completed session."""

    date: datetime
    score: Score = 0
    type: str


class ScoreDistribution(BaseModel):
    """Completed sessions per score band."""

    excellent: int = Field(default=0, ge=0, description="90-100")
    good: int = Field(default=0, ge=0, description="70-89")
    average: int = Field(default=0, ge=0, description="50-69")
    poor: int = Field(default=0, ge=0, description="0-49")


class DashboardAnalytics(BaseModel):
    """Everything the dashboard shows for one owner."""

    total_sessions: int = 0
    completed_sessions: int = 0
    average_score: Score = 0
    improvement_rate: int = Field(
        default=0,
        description="Percent change of the recent second-half average over the first half"
    )

    recent_activity: list[ActivityItem] = Field(default_factory=list)
    performance_trend: list[TrendPoint] = Field(default_factory=list)
    interview_types: dict[str, int] = Field(default_factory=dict)
    score_distribution: ScoreDistribution = Field(default_factory=ScoreDistribution)

    top_strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
