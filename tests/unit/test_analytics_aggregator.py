from datetime import datetime, timedelta

from prepcoach.core.analytics_aggregator import (
    NO_STRENGTHS,
    NO_WEAKNESSES,
    AnalyticsAggregator,
    improvement_rate,
)
from prepcoach.models.interview import (
    InterviewSession,
    InterviewType,
    SessionClock,
    SessionStatus,
)
from prepcoach.models.performance import FeedbackBucket, Performance

NOW = datetime(2026, 3, 31, 12, 0, 0)


def _session(
    title: str,
    status: SessionStatus = SessionStatus.COMPLETED,
    started_days_ago: float | None = None,
    score: int | None = None,
    strengths: list[str] | None = None,
    weaknesses: list[str] | None = None,
    interview_type: InterviewType = InterviewType.TECHNICAL,
    created_days_ago: float = 60,
) -> InterviewSession:
    performance = None
    if score is not None:
        performance = Performance(
            overall_score=score,
            strengths=[FeedbackBucket(category="Overall Performance", points=strengths or [])],
            weaknesses=[FeedbackBucket(category="Areas for Improvement", points=weaknesses or [])],
        )
    start = NOW - timedelta(days=started_days_ago) if started_days_ago is not None else None
    return InterviewSession(
        owner_id="user-1",
        title=title,
        type=interview_type,
        status=status,
        clock=SessionClock(start_time=start),
        performance=performance,
        created_at=NOW - timedelta(days=created_days_ago),
    )


def _history() -> list[InterviewSession]:
    return [
        _session("old", started_days_ago=40, score=95, strengths=["Clear"], weaknesses=["Depth"]),
        _session("c2", started_days_ago=20, score=50, strengths=["Clear", "Structured"], weaknesses=["Depth", "Examples"]),
        _session("c3", started_days_ago=10, score=60, strengths=["Structured", "Clear"],
                 interview_type=InterviewType.BEHAVIORAL),
        _session("c4", started_days_ago=2, score=80, weaknesses=["Examples"]),
        _session("planned", status=SessionStatus.SCHEDULED, created_days_ago=1),
        _session("live", status=SessionStatus.IN_PROGRESS, started_days_ago=0.1),
    ]


def test_counts_and_average():
    dashboard = AnalyticsAggregator().dashboard(_history(), NOW)

    assert dashboard.total_sessions == 6
    assert dashboard.completed_sessions == 4
    assert dashboard.average_score == 71


def test_trend_covers_last_30_days_oldest_first():
    dashboard = AnalyticsAggregator().dashboard(_history(), NOW)

    assert [point.score for point in dashboard.performance_trend] == [50, 60, 80]
    assert dashboard.interview_types == {"technical": 2, "behavioral": 1}
    # first half (50, 60) averages 55, second half 80
    assert dashboard.improvement_rate == 45


def test_recent_activity_uses_start_or_creation_time():
    dashboard = AnalyticsAggregator().dashboard(_history(), NOW)

    assert [item.title for item in dashboard.recent_activity] == ["live", "planned", "c4", "c3", "c2"]
    planned = dashboard.recent_activity[1]
    assert planned.score == 0
    assert planned.status == "scheduled"
    assert planned.date == NOW - timedelta(days=1)


def test_score_distribution():
    distribution = AnalyticsAggregator().dashboard(_history(), NOW).score_distribution

    assert (distribution.excellent, distribution.good, distribution.average, distribution.poor) == (1, 1, 2, 0)


def test_top_feedback_by_frequency_ties_in_first_seen_order():
    dashboard = AnalyticsAggregator().dashboard(_history(), NOW)

    assert dashboard.top_strengths == ["Clear", "Structured"]
    assert dashboard.areas_for_improvement == ["Depth", "Examples"]


def test_completed_without_performance_counts_as_zero():
    sessions = [
        _session("scored", started_days_ago=3, score=80),
        _session("unscored", started_days_ago=2),
    ]
    dashboard = AnalyticsAggregator().dashboard(sessions, NOW)

    assert dashboard.average_score == 40
    assert dashboard.score_distribution.poor == 1


def test_empty_history():
    dashboard = AnalyticsAggregator().dashboard([], NOW)

    assert dashboard.total_sessions == 0
    assert dashboard.average_score == 0
    assert dashboard.improvement_rate == 0
    assert dashboard.recent_activity == []
    assert dashboard.top_strengths == [NO_STRENGTHS]
    assert dashboard.areas_for_improvement == [NO_WEAKNESSES]


def test_improvement_rate():
    assert improvement_rate([]) == 0
    assert improvement_rate([70]) == 0
    assert improvement_rate([0, 50]) == 0
    assert improvement_rate([40, 60]) == 50
    assert improvement_rate([80, 60, 40]) == -43


def test_dashboard_is_deterministic():
    first = AnalyticsAggregator().dashboard(_history(), NOW)
    second = AnalyticsAggregator().dashboard(list(reversed(_history())), NOW)

    assert first.performance_trend == second.performance_trend
    assert first.average_score == second.average_score
