"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

from fastapi import Header, HTTPException

from prepcoach.config import get_settings
from prepcoach.core.ai_reasoning import AIReasoningLayer
from prepcoach.core.audio_processor import AudioProcessor
from prepcoach.core.company_recommender import CompanyRecommender
from prepcoach.core.evaluation_engine import EvaluationEngine
from prepcoach.core.interview_orchestrator import InterviewOrchestrator
from prepcoach.core.media_analyzer import MediaAnalyzer
from prepcoach.core.question_bank import QuestionBank
from prepcoach.core.question_provider import QuestionProvider
from prepcoach.core.rate_limiter import InMemoryTTLStore, SlidingWindowRateLimiter
from prepcoach.storage.session_store import InMemorySessionStore


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_orchestrator: InterviewOrchestrator | None = None
_ai_reasoning: AIReasoningLayer | None = None
_media_analyzer: MediaAnalyzer | None = None
_audio_processor: AudioProcessor | None = None


def get_orchestrator() -> InterviewOrchestrator:
    """
    Get the interview orchestrator singleton.

    Lazily initializes all required components.
    """
    global _orchestrator, _ai_reasoning, _media_analyzer, _audio_processor

    if _orchestrator is None:
        settings = get_settings()

        _ai_reasoning = AIReasoningLayer()
        _media_analyzer = MediaAnalyzer(seed=settings.media_random_seed)
        _audio_processor = AudioProcessor()

        ai_reasoning = _ai_reasoning if _ai_reasoning.is_available else None

        _orchestrator = InterviewOrchestrator(
            session_store=InMemorySessionStore(),
            question_provider=QuestionProvider(
                ai_reasoning=ai_reasoning,
                question_bank=QuestionBank(seed=settings.question_random_seed),
            ),
            evaluation_engine=EvaluationEngine(
                ai_reasoning=ai_reasoning,
                media_analyzer=_media_analyzer,
                audio_processor=_audio_processor if _audio_processor.is_configured else None,
            ),
            company_recommender=CompanyRecommender(ai_reasoning),
            rate_limiter=SlidingWindowRateLimiter(
                InMemoryTTLStore(),
                max_attempts=settings.rate_limit_max_attempts,
                window_seconds=settings.rate_limit_window_seconds,
            ),
            settings=settings,
        )

    return _orchestrator


def get_owner_id(x_user_id: str | None = Header(default=None)) -> str:
    """Owner of the request, taken from the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return x_user_id.strip()


async def cleanup():
    """Cleanup resources on shutdown."""
    global _orchestrator, _ai_reasoning, _media_analyzer, _audio_processor

    if _audio_processor:
        await _audio_processor.close()
        _audio_processor = None

    if _media_analyzer:
        await _media_analyzer.close()
        _media_analyzer = None

    if _ai_reasoning:
        await _ai_reasoning.close()
        _ai_reasoning = None

    _orchestrator = None
