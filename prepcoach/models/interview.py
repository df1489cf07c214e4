"""
Interview session and state models for PrepCoach
"""

from datetime import datetime
from enum import Enum
from typing import Protocol, runtime_checkable
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field

from prepcoach.config import get_settings
from prepcoach.models.evaluation import Evaluation
from prepcoach.models.performance import Performance
from prepcoach.models.profile import CandidateProfile, ResumeContext
from prepcoach.models.question import (
    Question,
    QuestionCategory,
    QuestionDifficulty,
    QuestionEnrichment,
)


@runtime_checkable
class Ownable(Protocol):
    """Anything that belongs to exactly one owner."""

    def get_owner_id(self) -> str: ...


class InterviewType(str, Enum):
    """Kinds of interview a candidate can practice."""

    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    CASE = "case"
    SYSTEM_DESIGN = "system-design"
    GENERAL = "general"
    MIXED = "mixed"

    @property
    def question_category(self) -> QuestionCategory:
        """Category given to questions generated for this type."""
        if self == InterviewType.MIXED:
            return QuestionCategory.GENERAL
        return QuestionCategory(self.value)


class Subject(str, Enum):
    """Subject tags used to focus question generation."""

    JAVA = "java"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    CPP = "c++"
    DSA = "dsa"
    SYSTEM_DESIGN = "system-design"
    DATABASE = "database"
    NETWORKING = "networking"
    OS = "os"
    GENERAL = "general"
    ML = "ml"
    AI = "ai"
    DATA_SCIENCE = "data-science"
    BLOCKCHAIN = "blockchain"
    DEVOPS = "devops"
    CLOUD = "cloud"
    CYBERSECURITY = "cybersecurity"
    MOBILE = "mobile"
    REACT = "react"
    NODE = "node"


class InterviewDifficulty(str, Enum):
    """Session-level difficulty."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def question_difficulty(self) -> QuestionDifficulty:
        return {
            InterviewDifficulty.BEGINNER: QuestionDifficulty.EASY,
            InterviewDifficulty.INTERMEDIATE: QuestionDifficulty.MEDIUM,
            InterviewDifficulty.ADVANCED: QuestionDifficulty.HARD,
        }[self]


class SessionStatus(str, Enum):
    """Interview state machine states."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.CANCELLED)


class InterviewSettings(BaseModel):
    """User-configurable session options."""

    duration: int = Field(
        default_factory=lambda: get_settings().default_duration_minutes,
        ge=15, le=120,
        description="Planned session length in minutes"
    )
    question_count: int = Field(
        default_factory=lambda: get_settings().default_question_count,
        ge=5, le=50,
    )
    allow_voice_input: bool = True
    real_time_feedback: bool = True
    auto_advance: bool = False


class SessionConfig(BaseModel):
    """Everything needed to create a session, reused by retakes."""

    title: str = Field(default="Mock Interview", min_length=1, max_length=200)
    type: InterviewType = InterviewType.TECHNICAL
    subject: Subject = Subject.GENERAL
    difficulty: InterviewDifficulty = InterviewDifficulty.INTERMEDIATE
    settings: InterviewSettings = Field(default_factory=InterviewSettings)
    industry: str = ""
    job_role: str = ""
    resume_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    notes: str = ""


class SessionClock(BaseModel):
    """Lifecycle timestamps for a session."""

    start_time: datetime | None = None
    end_time: datetime | None = None
    pause_time: datetime | None = None
    resume_time: datetime | None = None
    duration: int | None = Field(default=None, description="Seconds between start and end")
    current_question: int = 0
    is_paused: bool = False


class AnswerSubmission(BaseModel):
    """Raw answer input, before validation and evaluation."""

    question_id: str = ""
    text: str = ""
    audio_url: str | None = None
    video_url: str | None = None
    time_spent: int = Field(default=0, ge=0, description="Seconds")

    @property
    def clean_text(self) -> str:
        return self.text.strip()

    @property
    def media_ref(self) -> str | None:
        """Recording carrying the spoken answer; audio wins over video."""
        return self.audio_url or self.video_url

    @property
    def has_content(self) -> bool:
        return bool(self.clean_text or self.audio_url or self.video_url)

    def placeholder_text(self) -> str:
        return "[Audio Recording]" if self.audio_url else "[Video Recording]"


class Answer(BaseModel):
    """A candidate's answer to one question."""

    question_id: str
    text: str = ""
    audio_url: str | None = None
    video_url: str | None = None
    time_spent: int = Field(default=0, ge=0, description="Seconds")
    submitted_at: datetime = Field(default_factory=datetime.utcnow)
    evaluation: Evaluation | None = None


class InterviewSession(BaseModel):
    """Complete interview session. Owns its questions, answers and performance."""

    # Identification
    id: str = Field(default_factory=lambda: str(uuid4()))
    owner_id: str

    # Configuration
    title: str = "Mock Interview"
    type: InterviewType = InterviewType.TECHNICAL
    subject: Subject = Subject.GENERAL
    difficulty: InterviewDifficulty = InterviewDifficulty.INTERMEDIATE
    settings: InterviewSettings = Field(default_factory=InterviewSettings)

    # Metadata
    industry: str = ""
    job_role: str = ""
    resume_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    notes: str = ""
    profile: CandidateProfile | None = None
    resume: ResumeContext | None = None

    # State
    status: SessionStatus = SessionStatus.SCHEDULED
    clock: SessionClock = Field(default_factory=SessionClock)

    # Questions & Answers
    questions: list[Question] = Field(default_factory=list)
    answers: list[Answer] = Field(default_factory=list)

    performance: Performance | None = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def get_owner_id(self) -> str:
        return self.owner_id

    # =========================================================================
    # QUESTIONS & ANSWERS
    # =========================================================================

    def find_question(self, question_id: str) -> Question | None:
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    def find_answer(self, question_id: str) -> Answer | None:
        for answer in self.answers:
            if answer.question_id == question_id:
                return answer
        return None

    def answered_question_ids(self) -> set[str]:
        return {answer.question_id for answer in self.answers}

    def upsert_answer(self, answer: Answer) -> bool:
        """
        Record an answer, replacing any earlier answer to the same question in place.

        Returns:
            True if an existing answer was replaced
        """
        for index, existing in enumerate(self.answers):
            if existing.question_id == answer.question_id:
                self.answers[index] = answer
                return True

        self.answers.append(answer)
        return False

    def apply_enrichment(self, enrichment: QuestionEnrichment | None) -> bool:
        """Backfill a question's ideal answer. Only the first enrichment sticks."""
        if enrichment is None:
            return False
        question = self.find_question(enrichment.question_id)
        if question is None:
            return False
        return question.apply_enrichment(enrichment)

    def all_questions_answered(self) -> bool:
        if not self.questions:
            return False
        question_ids = {question.id for question in self.questions}
        return question_ids <= self.answered_question_ids()

    # =========================================================================
    # DERIVED VALUES
    # =========================================================================

    @computed_field
    @property
    def completion_percentage(self) -> int:
        """Share of questions answered, 0-100."""
        if not self.questions:
            return 0
        return round(len(self.answers) / len(self.questions) * 100)

    @computed_field
    @property
    def time_remaining(self) -> int | None:
        """Seconds left of the planned duration, or None before start."""
        return self.get_time_remaining()

    def get_time_remaining(self, now: datetime | None = None) -> int | None:
        if not self.clock.start_time:
            return None
        if self.clock.end_time:
            return 0
        now = now or datetime.utcnow()
        elapsed = (now - self.clock.start_time).total_seconds()
        return max(0, int(self.settings.duration * 60 - elapsed))

    def get_duration_seconds(self) -> int:
        """Seconds between start and end (or now, if still running)."""
        if not self.clock.start_time:
            return 0
        end = self.clock.end_time or datetime.utcnow()
        return round((end - self.clock.start_time).total_seconds())

    def question_texts(self) -> list[str]:
        return [question.text for question in self.questions]

    def to_config(self) -> SessionConfig:
        return SessionConfig(
            title=self.title,
            type=self.type,
            subject=self.subject,
            difficulty=self.difficulty,
            settings=self.settings.model_copy(),
            industry=self.industry,
            job_role=self.job_role,
            resume_id=self.resume_id,
            tags=list(self.tags),
            notes=self.notes,
        )
