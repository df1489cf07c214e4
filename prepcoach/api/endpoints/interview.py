"""
Interview API endpoints

Handles interview session lifecycle:
- Creating, listing and deleting sessions
- Starting, pausing, resuming and ending
- Submitting answers
- Retakes and performance summaries
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from prepcoach.api.dependencies import get_orchestrator, get_owner_id
from prepcoach.core.exceptions import (
    AnswerValidationError,
    InvalidStateError,
    PersistenceError,
    PrepCoachError,
    QuestionNotFoundError,
    RateLimitExceededError,
    SessionNotFoundError,
)
from prepcoach.core.interview_orchestrator import InterviewOrchestrator
from prepcoach.models.evaluation import Evaluation
from prepcoach.models.interview import (
    AnswerSubmission,
    InterviewSession,
    InterviewType,
    SessionConfig,
    SessionStatus,
)
from prepcoach.models.performance import Performance
from prepcoach.models.profile import CandidateProfile, ResumeContext

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class ProfileRequest(BaseModel):
    """Candidate details used to tailor questions."""
    name: str = ""
    job_title: str = ""
    industry: str = ""
    experience_level: str = ""
    skills: list[str] = []


class ResumeRequest(BaseModel):
    """Already-extracted resume content."""
    summary: str = ""
    skills: list[str] = []
    experience: list[str] = []
    education: list[str] = []
    target_job_role: str = ""
    target_industry: str = ""


class CreateSessionRequest(SessionConfig):
    """Request model for creating a session."""
    profile: ProfileRequest | None = None
    resume: ResumeRequest | None = None


class SessionListResponse(BaseModel):
    """A page of sessions."""
    sessions: list[InterviewSession]
    total: int
    skip: int
    limit: int


class SubmitAnswerResponse(BaseModel):
    """Response after submitting an answer."""
    evaluation: Evaluation
    replaced: bool
    status: str
    current_question: int
    total_questions: int
    completion_percentage: int
    session_completed: bool
    performance: Performance | None = None


class DeleteResponse(BaseModel):
    """Outcome of a delete request."""
    session_id: str
    result: str = Field(description="'cancelled' for live sessions, 'deleted' for finished ones")


# ============================================================================
# ERROR MAPPING
# ============================================================================

_STATUS_CODES: dict[type[PrepCoachError], int] = {
    InvalidStateError: 400,
    AnswerValidationError: 400,
    SessionNotFoundError: 404,
    QuestionNotFoundError: 404,
    RateLimitExceededError: 429,
    PersistenceError: 500,
}


def _http_error(error: PrepCoachError) -> HTTPException:
    status_code = _STATUS_CODES.get(type(error), 500)
    headers = None
    if isinstance(error, RateLimitExceededError):
        headers = {"Retry-After": str(error.retry_after)}
    if status_code >= 500:
        logger.error(f"Request failed: {error}")
    return HTTPException(status_code=status_code, detail=str(error), headers=headers)


# ============================================================================
# SESSION MANAGEMENT
# ============================================================================

@router.post("/sessions", response_model=InterviewSession, status_code=201)
async def create_session(
    request: CreateSessionRequest,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> InterviewSession:
    """
    Create a new interview session.

    Questions are generated up front; the session starts out scheduled.
    """
    config = SessionConfig(**request.model_dump(exclude={"profile", "resume"}))

    profile = None
    if request.profile is not None:
        profile = CandidateProfile(owner_id=owner_id, **request.profile.model_dump())

    resume = None
    if request.resume is not None:
        resume = ResumeContext(
            resume_id=config.resume_id or "inline",
            owner_id=owner_id,
            **request.resume.model_dump(),
        )

    try:
        return await orchestrator.create_session(owner_id, config, profile=profile, resume=resume)
    except PrepCoachError as e:
        raise _http_error(e) from e


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions(
    status: SessionStatus | None = None,
    type: InterviewType | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionListResponse:
    """List the caller's sessions, newest first."""
    sessions, total = await orchestrator.list_sessions(
        owner_id, status=status, interview_type=type, skip=skip, limit=limit
    )
    return SessionListResponse(sessions=sessions, total=total, skip=skip, limit=limit)


@router.get("/sessions/{session_id}", response_model=InterviewSession)
async def get_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> InterviewSession:
    """Get one session."""
    try:
        return await orchestrator.get_session(session_id, owner_id)
    except PrepCoachError as e:
        raise _http_error(e) from e


@router.delete("/sessions/{session_id}", response_model=DeleteResponse)
async def delete_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> DeleteResponse:
    """Cancel a live session or delete a finished one."""
    try:
        result = await orchestrator.delete_session(session_id, owner_id)
    except PrepCoachError as e:
        raise _http_error(e) from e
    return DeleteResponse(session_id=session_id, result=result)


@router.post("/sessions/{session_id}/retake", response_model=InterviewSession, status_code=201)
async def retake_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> InterviewSession:
    """Create a fresh scheduled session with the same configuration."""
    try:
        return await orchestrator.retake_session(session_id, owner_id)
    except PrepCoachError as e:
        raise _http_error(e) from e


# ============================================================================
# LIFECYCLE
# ============================================================================

@router.post("/sessions/{session_id}/start", response_model=InterviewSession)
async def start_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> InterviewSession:
    """Start a scheduled session."""
    try:
        return await orchestrator.start_session(session_id, owner_id)
    except PrepCoachError as e:
        raise _http_error(e) from e


@router.post("/sessions/{session_id}/pause", response_model=InterviewSession)
async def pause_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> InterviewSession:
    """Pause an in-progress session."""
    try:
        return await orchestrator.pause_session(session_id, owner_id)
    except PrepCoachError as e:
        raise _http_error(e) from e


@router.post("/sessions/{session_id}/resume", response_model=InterviewSession)
async def resume_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> InterviewSession:
    """Resume a paused session."""
    try:
        return await orchestrator.resume_session(session_id, owner_id)
    except PrepCoachError as e:
        raise _http_error(e) from e


@router.post("/sessions/{session_id}/end", response_model=InterviewSession)
async def end_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> InterviewSession:
    """End the session early and build its performance summary."""
    try:
        return await orchestrator.end_session(session_id, owner_id)
    except PrepCoachError as e:
        raise _http_error(e) from e


# ============================================================================
# ANSWERS & PERFORMANCE
# ============================================================================

@router.post("/sessions/{session_id}/answers", response_model=SubmitAnswerResponse)
async def submit_answer(
    session_id: str,
    request: AnswerSubmission,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SubmitAnswerResponse:
    """
    Submit an answer to one question.

    Evaluation degrades to heuristic scoring when upstream services
    fail, so a valid submission always comes back with scores.
    """
    try:
        result = await orchestrator.submit_answer(session_id, owner_id, request)
    except PrepCoachError as e:
        raise _http_error(e) from e

    session = result.session
    return SubmitAnswerResponse(
        evaluation=result.evaluation,
        replaced=result.replaced,
        status=session.status.value,
        current_question=session.clock.current_question,
        total_questions=len(session.questions),
        completion_percentage=session.completion_percentage,
        session_completed=session.status == SessionStatus.COMPLETED,
        performance=session.performance,
    )


@router.get("/sessions/{session_id}/performance", response_model=Performance)
async def get_performance(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Performance:
    """Get the performance summary of a completed session."""
    try:
        return await orchestrator.get_performance(session_id, owner_id)
    except PrepCoachError as e:
        raise _http_error(e) from e
