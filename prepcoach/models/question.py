"""
Question models for PrepCoach
"""

from enum import Enum

from pydantic import BaseModel, Field


class QuestionCategory(str, Enum):
    """Categories a question can belong to."""

    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    CASE = "case"
    SYSTEM_DESIGN = "system-design"
    GENERAL = "general"


class QuestionDifficulty(str, Enum):
    """Difficulty buckets for individual questions."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Question(BaseModel):
    """A single interview question owned by one session."""

    id: str
    text: str = Field(..., min_length=1)
    category: QuestionCategory = QuestionCategory.GENERAL
    difficulty: QuestionDifficulty = QuestionDifficulty.MEDIUM

    expected_keywords: list[str] = Field(default_factory=list)
    time_limit: int = Field(default=120, ge=10, description="Time budget in seconds")
    order: int = 0

    # Backfilled the first time an answer to this question is evaluated
    correct_answer: str | None = None
    key_points: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)

    @property
    def is_enriched(self) -> bool:
        return bool(self.correct_answer)

    def apply_enrichment(self, enrichment: "QuestionEnrichment") -> bool:
        """
        Backfill the ideal answer. Write-once.

        Returns:
            True if the enrichment was applied
        """
        if self.is_enriched or not enrichment.correct_answer:
            return False

        self.correct_answer = enrichment.correct_answer
        self.key_points = list(enrichment.key_points)
        self.common_mistakes = list(enrichment.common_mistakes)
        return True


class QuestionEnrichment(BaseModel):
    """Ideal-answer data produced while evaluating an answer."""

    question_id: str
    correct_answer: str
    key_points: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)
