"""
Interview Orchestrator - State machine for managing session lifecycle.

This is the central coordinator for a mock interview. It owns the
status guards, drives question generation and answer evaluation, and
finalizes the performance summary when a session completes.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Awaitable, Callable

from pydantic import BaseModel

from prepcoach.config import Settings, get_settings
from prepcoach.core.analytics_aggregator import AnalyticsAggregator
from prepcoach.core.company_recommender import CompanyRecommender
from prepcoach.core.evaluation_engine import EvaluationEngine
from prepcoach.core.exceptions import (
    AnswerValidationError,
    InvalidStateError,
    PersistenceError,
    QuestionNotFoundError,
    SessionNotFoundError,
)
from prepcoach.core.performance_aggregator import PerformanceAggregator
from prepcoach.core.question_provider import QuestionProvider
from prepcoach.core.rate_limiter import RateLimiter
from prepcoach.models.analytics import DashboardAnalytics
from prepcoach.models.evaluation import Evaluation
from prepcoach.models.interview import (
    Answer,
    AnswerSubmission,
    InterviewSession,
    InterviewType,
    SessionConfig,
    SessionStatus,
)
from prepcoach.models.performance import Performance
from prepcoach.models.profile import CandidateProfile, ResumeContext
from prepcoach.storage.session_store import SessionStore

logger = logging.getLogger(__name__)

StateChangeCallback = Callable[[str, SessionStatus, SessionStatus], Awaitable[None]]


class SubmissionResult(BaseModel):
    """What a caller gets back after submitting an answer."""

    session: InterviewSession
    evaluation: Evaluation
    replaced: bool = False


class InterviewOrchestrator:
    """
    Manages the session lifecycle using a state machine pattern.

    States:
        scheduled → in-progress ⇄ paused → completed
        (any non-terminal state) → cancelled

    The orchestrator coordinates between:
    - Question Provider (question generation)
    - Evaluation Engine (answer scoring)
    - Performance Aggregator and Company Recommender (completion)
    - Session Store (persistence)
    """

    VALID_TRANSITIONS: dict[SessionStatus, list[SessionStatus]] = {
        SessionStatus.SCHEDULED: [SessionStatus.IN_PROGRESS, SessionStatus.CANCELLED],
        SessionStatus.IN_PROGRESS: [SessionStatus.PAUSED, SessionStatus.COMPLETED, SessionStatus.CANCELLED],
        SessionStatus.PAUSED: [SessionStatus.IN_PROGRESS, SessionStatus.COMPLETED, SessionStatus.CANCELLED],
        SessionStatus.COMPLETED: [],  # Terminal state
        SessionStatus.CANCELLED: [],  # Terminal state
    }

    def __init__(
        self,
        session_store: SessionStore,
        question_provider: QuestionProvider | None = None,
        evaluation_engine: EvaluationEngine | None = None,
        performance_aggregator: PerformanceAggregator | None = None,
        company_recommender: CompanyRecommender | None = None,
        rate_limiter: RateLimiter | None = None,
        analytics_aggregator: AnalyticsAggregator | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            session_store: Owner-scoped session persistence
            question_provider: Question generation with static fallback
            evaluation_engine: Answer evaluation cascade
            performance_aggregator: Completion summary builder
            company_recommender: Best-effort company suggestions
            rate_limiter: Per-owner attempt limiter for create and retake
            analytics_aggregator: Cross-session dashboard builder
            settings: Application settings
            clock: Source of "now", injectable for tests
        """
        self.session_store = session_store
        self.question_provider = question_provider or QuestionProvider()
        self.evaluation_engine = evaluation_engine or EvaluationEngine()
        self.performance_aggregator = performance_aggregator or PerformanceAggregator()
        self.company_recommender = company_recommender
        self.rate_limiter = rate_limiter
        self.analytics_aggregator = analytics_aggregator or AnalyticsAggregator()
        self.settings = settings or get_settings()
        self._now = clock

        # Serializes read-modify-write per session. Entries live only while held or awaited.
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

        self._state_change_callbacks: list[StateChangeCallback] = []

    # =========================================================================
    # CALLBACKS
    # =========================================================================

    def on_state_change(self, callback: StateChangeCallback) -> None:
        """Register a callback invoked after every persisted status change."""
        self._state_change_callbacks.append(callback)

    async def _notify(self, session_id: str, old: SessionStatus, new: SessionStatus) -> None:
        for callback in self._state_change_callbacks:
            try:
                await callback(session_id, old, new)
            except Exception as e:
                logger.error(f"State change callback error: {e}")

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def _check_transition(self, session: InterviewSession, action: str, new_status: SessionStatus) -> None:
        """
        Validate a transition without touching the session.

        Raises:
            InvalidStateError: If the transition is not allowed
        """
        if new_status not in self.VALID_TRANSITIONS.get(session.status, []):
            raise InvalidStateError(action, session.status.value)

    @asynccontextmanager
    async def _lock_for(self, session_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._lock_users[session_id] = self._lock_users.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[session_id] -= 1
            if self._lock_users[session_id] == 0:
                del self._lock_users[session_id]
                del self._locks[session_id]

    async def _load(self, session_id: str, owner_id: str) -> InterviewSession:
        session = await self.session_store.get(session_id, owner_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def _persist(self, session: InterviewSession) -> InterviewSession:
        session.updated_at = self._now()
        try:
            await self.session_store.save(session)
        except PersistenceError:
            raise
        except Exception as e:
            logger.error(f"Failed to save session {session.id}: {e}")
            raise PersistenceError(f"Could not save session {session.id}") from e
        return session

    async def _commit(self, session: InterviewSession, old_status: SessionStatus) -> InterviewSession:
        """Persist and, when the status moved, log and notify."""
        await self._persist(session)
        if session.status != old_status:
            logger.info(f"Session {session.id}: {old_status.value} → {session.status.value}")
            await self._notify(session.id, old_status, session.status)
        return session

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    async def create_session(
        self,
        owner_id: str,
        config: SessionConfig,
        profile: CandidateProfile | None = None,
        resume: ResumeContext | None = None,
    ) -> InterviewSession:
        """
        Create a scheduled session with freshly generated questions.

        Args:
            owner_id: Owner of the new session
            config: Session configuration
            profile: Candidate profile used to tailor questions
            resume: Optional resume context

        Returns:
            New InterviewSession

        Raises:
            RateLimitExceededError: If the owner created too many sessions recently
        """
        if self.rate_limiter is not None:
            self.rate_limiter.check(owner_id, "create")

        session = await self._build_session(owner_id, config, profile, resume)
        await self._persist(session)

        logger.info(f"Created interview session: {session.id} ({len(session.questions)} questions)")
        return session

    async def _build_session(
        self,
        owner_id: str,
        config: SessionConfig,
        profile: CandidateProfile | None,
        resume: ResumeContext | None,
    ) -> InterviewSession:
        previously_asked = await self._previously_asked(owner_id, config.type)

        questions = await self.question_provider.generate(
            profile=profile,
            resume=resume,
            interview_type=config.type,
            subject=config.subject,
            difficulty=config.difficulty,
            count=config.settings.question_count,
            previously_asked=previously_asked,
        )

        now = self._now()
        return InterviewSession(
            owner_id=owner_id,
            **config.model_dump(),
            profile=profile,
            resume=resume,
            questions=questions,
            created_at=now,
            updated_at=now,
        )

    async def _previously_asked(self, owner_id: str, interview_type: InterviewType) -> list[str]:
        try:
            return await self.session_store.recent_question_texts(
                owner_id,
                interview_type,
                self.settings.previous_sessions_window,
            )
        except Exception as e:
            logger.warning(f"Could not load previous questions for {owner_id}, not excluding any: {e}")
            return []

    async def get_session(self, session_id: str, owner_id: str) -> InterviewSession:
        """Get a session by ID. Foreign sessions look missing."""
        return await self._load(session_id, owner_id)

    async def list_sessions(
        self,
        owner_id: str,
        status: SessionStatus | None = None,
        interview_type: InterviewType | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[InterviewSession], int]:
        """
        List the owner's sessions, newest first.

        Returns:
            (page of sessions, total matching count)
        """
        sessions = await self.session_store.list_for_owner(
            owner_id, status=status, interview_type=interview_type, skip=skip, limit=limit
        )
        total = await self.session_store.count_for_owner(
            owner_id, status=status, interview_type=interview_type
        )
        return sessions, total

    async def delete_session(self, session_id: str, owner_id: str) -> str:
        """
        Cancel a live session, or remove a finished one.

        Returns:
            "cancelled" or "deleted"
        """
        async with self._lock_for(session_id):
            session = await self._load(session_id, owner_id)
            old_status = session.status

            if old_status.is_terminal:
                await self.session_store.delete(session_id, owner_id)
                logger.info(f"Deleted interview session: {session_id}")
                return "deleted"

            self._check_transition(session, "cancel", SessionStatus.CANCELLED)
            session.status = SessionStatus.CANCELLED
            session.clock.is_paused = False
            await self._commit(session, old_status)
            return "cancelled"

    async def retake_session(self, session_id: str, owner_id: str) -> InterviewSession:
        """
        Create a new scheduled session from an existing one's configuration.

        The source session is not modified and may be in any status.
        """
        source = await self._load(session_id, owner_id)

        if self.rate_limiter is not None:
            self.rate_limiter.check(owner_id, "retake")

        config = source.to_config()
        config.title = f"{source.title} (Retake)"

        session = await self._build_session(owner_id, config, source.profile, source.resume)
        await self._persist(session)

        logger.info(f"Created retake {session.id} of session {source.id}")
        return session

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def start_session(self, session_id: str, owner_id: str) -> InterviewSession:
        """Start a scheduled session."""
        async with self._lock_for(session_id):
            session = await self._load(session_id, owner_id)
            if session.status != SessionStatus.SCHEDULED:
                raise InvalidStateError("start", session.status.value)

            old_status = session.status
            session.status = SessionStatus.IN_PROGRESS
            session.clock.start_time = self._now()
            session.clock.current_question = 0
            session.clock.is_paused = False
            return await self._commit(session, old_status)

    async def pause_session(self, session_id: str, owner_id: str) -> InterviewSession:
        """Pause an in-progress session."""
        async with self._lock_for(session_id):
            session = await self._load(session_id, owner_id)
            self._check_transition(session, "pause", SessionStatus.PAUSED)

            old_status = session.status
            session.status = SessionStatus.PAUSED
            session.clock.pause_time = self._now()
            session.clock.is_paused = True
            return await self._commit(session, old_status)

    async def resume_session(self, session_id: str, owner_id: str) -> InterviewSession:
        """Resume a paused session."""
        async with self._lock_for(session_id):
            session = await self._load(session_id, owner_id)
            if session.status != SessionStatus.PAUSED:
                raise InvalidStateError("resume", session.status.value)

            old_status = session.status
            self._resume(session)
            return await self._commit(session, old_status)

    def _resume(self, session: InterviewSession) -> None:
        session.status = SessionStatus.IN_PROGRESS
        session.clock.resume_time = self._now()
        session.clock.is_paused = False

    async def end_session(self, session_id: str, owner_id: str) -> InterviewSession:
        """End an in-progress or paused session and build its performance summary."""
        async with self._lock_for(session_id):
            session = await self._load(session_id, owner_id)
            self._check_transition(session, "end", SessionStatus.COMPLETED)

            old_status = session.status
            await self._complete(session)
            return await self._commit(session, old_status)

    async def _complete(self, session: InterviewSession) -> None:
        """Finalize clock and performance. The caller persists."""
        session.clock.end_time = self._now()
        session.clock.duration = session.get_duration_seconds()
        session.clock.is_paused = False

        performance = self.performance_aggregator.aggregate(session.questions, session.answers)
        session.performance = performance
        session.status = SessionStatus.COMPLETED

        performance.company_recommendations = await self._recommend_companies(session)

        logger.info(
            f"Session {session.id} complete: overall={performance.overall_score} "
            f"answered={performance.metrics.answered_questions}/{performance.metrics.total_questions}"
        )

    async def _recommend_companies(self, session: InterviewSession) -> list:
        if self.company_recommender is None:
            return []
        try:
            return await self.company_recommender.recommend(
                profile=session.profile,
                session=session,
                resume=session.resume,
            )
        except Exception as e:
            logger.warning(f"Company recommendations failed for {session.id}, leaving empty: {e}")
            return []

    # =========================================================================
    # ANSWERS
    # =========================================================================

    async def submit_answer(
        self,
        session_id: str,
        owner_id: str,
        submission: AnswerSubmission,
    ) -> SubmissionResult:
        """
        Evaluate and record an answer.

        A paused session is resumed first. Re-answering a question replaces
        the earlier answer. Answering the last open question completes the
        session.

        Raises:
            AnswerValidationError: Missing question id or no content
            InvalidStateError: Session is not in progress
            QuestionNotFoundError: Question is not part of the session
            PersistenceError: The updated session could not be saved
        """
        if not submission.question_id.strip():
            raise AnswerValidationError("Question ID is required")
        if not submission.has_content:
            raise AnswerValidationError("Answer must include text, audio or video")

        async with self._lock_for(session_id):
            session = await self._load(session_id, owner_id)
            old_status = session.status

            if session.status == SessionStatus.PAUSED:
                logger.info(f"Auto-resuming paused session {session.id} on answer submission")
                self._resume(session)
            elif session.status != SessionStatus.IN_PROGRESS:
                raise InvalidStateError("submit an answer to", session.status.value)

            question = session.find_question(submission.question_id)
            if question is None:
                raise QuestionNotFoundError(submission.question_id)

            outcome = await self.evaluation_engine.evaluate_answer(
                question,
                submission,
                subject=session.subject.value,
            )

            answer = Answer(
                question_id=question.id,
                text=outcome.answer_text,
                audio_url=submission.audio_url,
                video_url=submission.video_url,
                time_spent=submission.time_spent,
                submitted_at=self._now(),
                evaluation=outcome.evaluation,
            )
            replaced = session.upsert_answer(answer)
            session.apply_enrichment(outcome.enrichment)
            session.clock.current_question = len(session.answered_question_ids())

            if session.all_questions_answered():
                await self._complete(session)

            await self._commit(session, old_status)

        return SubmissionResult(
            session=session,
            evaluation=outcome.evaluation,
            replaced=replaced,
        )

    # =========================================================================
    # PERFORMANCE
    # =========================================================================

    async def get_performance(self, session_id: str, owner_id: str) -> Performance:
        """
        Get the performance summary of a completed session.

        Raises:
            InvalidStateError: If the session has not completed
        """
        session = await self._load(session_id, owner_id)
        if session.performance is None:
            raise InvalidStateError("view performance of", session.status.value)
        return session.performance


    # =========================================================================
    # ANALYTICS
    # =========================================================================

    async def get_dashboard(self, owner_id: str) -> DashboardAnalytics:
        """Aggregate analytics across all of the owner's sessions."""
        total = await self.session_store.count_for_owner(owner_id)
        sessions = await self.session_store.list_for_owner(owner_id, limit=total)
        return self.analytics_aggregator.dashboard(sessions, self._now())
