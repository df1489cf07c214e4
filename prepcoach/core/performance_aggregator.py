"""
Performance Aggregator for PrepCoach

Builds the session-level Performance summary from questions and answers:
- Overall and per-category average scores
- Answer counts and time metrics
- De-duplicated strengths, weaknesses and action items

The aggregator is a pure function of its inputs. Running it twice on
the same questions and answers gives identical output.
"""

import logging

from prepcoach.models.interview import Answer
from prepcoach.models.performance import (
    FeedbackBucket,
    Performance,
    PerformanceMetrics,
    RecommendationBucket,
)
from prepcoach.models.question import Question, QuestionCategory

logger = logging.getLogger(__name__)

MAX_FEEDBACK_ITEMS = 10

STRENGTHS_BUCKET = "Overall Performance"
WEAKNESSES_BUCKET = "Areas for Improvement"
ACTIONS_BUCKET = "Action Items"

CATEGORY_KEYS = {
    QuestionCategory.TECHNICAL: "technical",
    QuestionCategory.BEHAVIORAL: "behavioral",
    QuestionCategory.CASE: "case",
    QuestionCategory.SYSTEM_DESIGN: "systemDesign",
    QuestionCategory.GENERAL: "general",
}


class PerformanceAggregator:
    """
    Computes Performance for a completed session.

    Never raises on well-formed models: answers without an evaluation,
    or referencing unknown questions, are simply left out of the
    affected averages.
    """

    def aggregate(self, questions: list[Question], answers: list[Answer]) -> Performance:
        """
        Aggregate answers into a Performance summary.

        Args:
            questions: Session questions, in order
            answers: Session answers, in submission order

        Returns:
            Performance without company recommendations
        """
        categories = {question.id: question.category for question in questions}

        total_score = 0
        scored = 0
        category_sums: dict[str, int] = {}
        category_counts: dict[str, int] = {}

        for answer in answers:
            if answer.evaluation is None:
                continue

            score = answer.evaluation.score
            total_score += score
            scored += 1

            category = categories.get(answer.question_id)
            if category is None:
                continue
            key = CATEGORY_KEYS[category]
            category_sums[key] = category_sums.get(key, 0) + score
            category_counts[key] = category_counts.get(key, 0) + 1

        overall = round(total_score / scored) if scored else 0
        category_scores = {
            key: round(category_sums[key] / category_counts[key])
            for key in sorted(category_sums)
        }

        total_time = sum(answer.time_spent for answer in answers)
        average_time = round(total_time / len(answers)) if answers else 0

        strengths = _collect(answers, "strengths")
        weaknesses = _collect(answers, "weaknesses")
        suggestions = _collect(answers, "suggestions")

        logger.info(
            f"Aggregated {scored}/{len(answers)} scored answers: overall={overall}"
        )

        return Performance(
            overall_score=overall,
            category_scores=category_scores,
            metrics=PerformanceMetrics(
                total_questions=len(questions),
                answered_questions=len(answers),
                average_time_per_question=average_time,
                total_time=total_time,
            ),
            strengths=[FeedbackBucket(category=STRENGTHS_BUCKET, points=strengths)] if strengths else [],
            weaknesses=[FeedbackBucket(category=WEAKNESSES_BUCKET, points=weaknesses)] if weaknesses else [],
            recommendations=(
                [RecommendationBucket(category=ACTIONS_BUCKET, priority="high", recommendations=suggestions)]
                if suggestions else []
            ),
        )


def _collect(answers: list[Answer], field: str) -> list[str]:
    """First-occurrence de-duplicated feedback items, capped."""
    items: list[str] = []
    seen: set[str] = set()
    for answer in answers:
        if answer.evaluation is None:
            continue
        for item in getattr(answer.evaluation.feedback, field):
            if item not in seen:
                seen.add(item)
                items.append(item)
    return items[:MAX_FEEDBACK_ITEMS]
