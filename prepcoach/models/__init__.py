"""
Data models and schemas for PrepCoach

Contains Pydantic models for:
- Interview sessions and answers
- Questions
- Evaluations and media signals
- Performance summaries and dashboard analytics
- Candidate profile and resume context
"""

from prepcoach.models.analytics import (
    ActivityItem,
    DashboardAnalytics,
    ScoreDistribution,
    TrendPoint,
)
from prepcoach.models.evaluation import (
    AudioSignal,
    ContentScore,
    Correctness,
    CorrectnessResult,
    Evaluation,
    EvaluationFeedback,
    EvaluationSource,
    ImprovementArea,
    ImprovementPriority,
    KeywordMatch,
    MediaSignals,
    PaceRating,
    VideoSignal,
)
from prepcoach.models.interview import (
    Answer,
    AnswerSubmission,
    InterviewDifficulty,
    InterviewSession,
    InterviewSettings,
    InterviewType,
    Ownable,
    SessionClock,
    SessionConfig,
    SessionStatus,
    Subject,
)
from prepcoach.models.performance import (
    CompanyRecommendation,
    FeedbackBucket,
    Performance,
    PerformanceMetrics,
    RecommendationBucket,
)
from prepcoach.models.profile import CandidateProfile, ResumeContext
from prepcoach.models.question import (
    Question,
    QuestionCategory,
    QuestionDifficulty,
    QuestionEnrichment,
)

__all__ = [
    # Analytics
    "ActivityItem",
    "DashboardAnalytics",
    "ScoreDistribution",
    "TrendPoint",
    # Interview
    "Answer",
    "AnswerSubmission",
    "InterviewDifficulty",
    "InterviewSession",
    "InterviewSettings",
    "InterviewType",
    "Ownable",
    "SessionClock",
    "SessionConfig",
    "SessionStatus",
    "Subject",
    # Question
    "Question",
    "QuestionCategory",
    "QuestionDifficulty",
    "QuestionEnrichment",
    # Evaluation
    "AudioSignal",
    "ContentScore",
    "Correctness",
    "CorrectnessResult",
    "Evaluation",
    "EvaluationFeedback",
    "EvaluationSource",
    "ImprovementArea",
    "ImprovementPriority",
    "KeywordMatch",
    "MediaSignals",
    "PaceRating",
    "VideoSignal",
    # Performance
    "CompanyRecommendation",
    "FeedbackBucket",
    "Performance",
    "PerformanceMetrics",
    "RecommendationBucket",
    # Profile
    "CandidateProfile",
    "ResumeContext",
]
