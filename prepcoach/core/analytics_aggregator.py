"""
Analytics Aggregator for PrepCoach

Builds the dashboard view across all of an owner's sessions:
- Session counts and the average completed score
- Recent activity and a 30-day score trend
- Improvement rate, type mix and score bands
- The most frequent strengths and weaknesses

Like the Performance Aggregator, this is a pure function of its inputs.
"""

import logging
import math
from collections import Counter
from datetime import datetime, timedelta

from prepcoach.models.analytics import (
    ActivityItem,
    DashboardAnalytics,
    ScoreDistribution,
    TrendPoint,
)
from prepcoach.models.interview import InterviewSession, SessionStatus
from prepcoach.models.performance import FeedbackBucket

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5
TREND_WINDOW = timedelta(days=30)
TOP_FEEDBACK_LIMIT = 3

NO_STRENGTHS = "Complete more interviews to see your strengths"
NO_WEAKNESSES = "Complete more interviews to identify areas for improvement"


def _started_at(session: InterviewSession) -> datetime:
    return session.clock.start_time or session.created_at


def _overall(session: InterviewSession) -> int:
    return session.performance.overall_score if session.performance else 0


def _mean(values: list[int]) -> float:
    return sum(values) / len(values) if values else 0.0


def improvement_rate(scores: list[int]) -> int:
    """
    Percent change of the later half's average over the earlier half's.

    The earlier half takes the extra score when the count is odd.

    Args:
        scores: Overall scores, oldest first

    Returns:
        Rounded percentage, 0 with fewer than two scores or a zero baseline
    """
    if len(scores) < 2:
        return 0
    split = math.ceil(len(scores) / 2)
    first_avg = _mean(scores[:split])
    second_avg = _mean(scores[split:])
    if first_avg <= 0:
        return 0
    return round((second_avg - first_avg) / first_avg * 100)


def top_points(buckets: list[FeedbackBucket], limit: int = TOP_FEEDBACK_LIMIT) -> list[str]:
    """Most frequent points across buckets; ties keep first-seen order."""
    counts = Counter(point for bucket in buckets for point in bucket.points)
    return [point for point, _ in counts.most_common(limit)]


class AnalyticsAggregator:
    """Aggregates an owner's sessions into dashboard analytics."""

    def dashboard(self, sessions: list[InterviewSession], now: datetime) -> DashboardAnalytics:
        """
        Build the dashboard for one owner's sessions.

        Args:
            sessions: All of the owner's sessions, in any order
            now: Reference time for the trend window

        Returns:
            DashboardAnalytics
        """
        completed = [s for s in sessions if s.status == SessionStatus.COMPLETED]
        completed_scores = [_overall(s) for s in completed]

        trend_sessions = sorted(
            (s for s in completed if _started_at(s) >= now - TREND_WINDOW),
            key=_started_at,
        )
        trend = [
            TrendPoint(date=_started_at(s), score=_overall(s), type=s.type.value)
            for s in trend_sessions
        ]

        strengths = [bucket for s in completed if s.performance for bucket in s.performance.strengths]
        weaknesses = [bucket for s in completed if s.performance for bucket in s.performance.weaknesses]

        analytics = DashboardAnalytics(
            total_sessions=len(sessions),
            completed_sessions=len(completed),
            average_score=round(_mean(completed_scores)),
            improvement_rate=improvement_rate([point.score for point in trend]),
            recent_activity=self._recent_activity(sessions),
            performance_trend=trend,
            interview_types=dict(Counter(point.type for point in trend)),
            score_distribution=self._score_distribution(completed_scores),
            top_strengths=top_points(strengths) or [NO_STRENGTHS],
            areas_for_improvement=top_points(weaknesses) or [NO_WEAKNESSES],
        )

        logger.debug(
            f"Dashboard: {analytics.completed_sessions}/{analytics.total_sessions} completed, "
            f"average={analytics.average_score}"
        )
        return analytics

    def _recent_activity(self, sessions: list[InterviewSession]) -> list[ActivityItem]:
        latest = sorted(sessions, key=_started_at, reverse=True)[:RECENT_ACTIVITY_LIMIT]
        return [
            ActivityItem(
                session_id=s.id,
                title=s.title or "Mock Interview",
                date=_started_at(s),
                score=_overall(s),
                status=s.status.value,
                interview_type=s.type.value,
            )
            for s in latest
        ]

    def _score_distribution(self, scores: list[int]) -> ScoreDistribution:
        distribution = ScoreDistribution()
        for score in scores:
            if score >= 90:
                distribution.excellent += 1
            elif score >= 70:
                distribution.good += 1
            elif score >= 50:
                distribution.average += 1
            else:
                distribution.poor += 1
        return distribution
