import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from prepcoach.config import get_settings
from prepcoach.core.company_recommender import CompanyRecommender
from prepcoach.core.evaluation_engine import EvaluationEngine
from prepcoach.core.exceptions import AIUnavailableError
from prepcoach.core.interview_orchestrator import InterviewOrchestrator
from prepcoach.core.media_analyzer import MediaAnalyzer
from prepcoach.core.question_bank import QuestionBank
from prepcoach.core.question_provider import QuestionProvider
from prepcoach.models.evaluation import (
    ContentScore,
    CorrectnessResult,
    Evaluation,
    EvaluationFeedback,
    EvaluationSource,
)
from prepcoach.models.performance import CompanyRecommendation
from prepcoach.models.question import Question, QuestionCategory
from prepcoach.storage.session_store import InMemorySessionStore


@pytest.fixture(autouse=True)
def offline_settings(monkeypatch):
    """No gateway, media service or tracing unless a test opts in."""
    monkeypatch.setenv("LLM_BASE_URL", "")
    monkeypatch.setenv("MEDIA_ANALYSIS_URL", "")
    monkeypatch.setenv("WHISPER_API_URL", "")
    monkeypatch.setenv("USE_LOCAL_WHISPER", "false")
    monkeypatch.setenv("LANGFUSE_ENABLED", "false")
    get_settings.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 3, 2, 9, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class FakeAI:
    """
    Stand-in for AIReasoningLayer.

    Each operation returns its canned value, or raises AIUnavailableError
    when its name is in `fail`.
    """

    def __init__(
        self,
        questions: list[dict] | None = None,
        content: ContentScore | None = None,
        correctness: CorrectnessResult | None = None,
        companies: list[CompanyRecommendation] | None = None,
        fail: tuple[str, ...] = (),
    ):
        self.questions = questions or []
        self.content = content
        self.correctness = correctness
        self.companies = companies or []
        self.fail = set(fail)
        self.calls: list[tuple[str, dict]] = []

    def _maybe_fail(self, name: str, kwargs: dict) -> None:
        self.calls.append((name, kwargs))
        if name in self.fail:
            raise AIUnavailableError(f"{name} unavailable")

    async def generate_questions(self, **kwargs):
        self._maybe_fail("generate_questions", kwargs)
        return [dict(item) for item in self.questions]

    async def score_content(self, **kwargs):
        self._maybe_fail("score_content", kwargs)
        return self.content

    async def evaluate_correctness(self, **kwargs):
        self._maybe_fail("evaluate_correctness", kwargs)
        return self.correctness

    async def recommend_companies(self, **kwargs):
        self._maybe_fail("recommend_companies", kwargs)
        return self.companies


class FakeTranscriber:
    def __init__(self, transcript: str | None = None, error: Exception | None = None):
        self.transcript = transcript
        self.error = error
        self.refs: list[str] = []

    async def transcribe_recording(self, ref: str) -> str:
        self.refs.append(ref)
        if self.error is not None:
            raise self.error
        return self.transcript or ""


def make_question(
    question_id: str = "q1",
    text: str = "How does a hash table handle collisions?",
    category: QuestionCategory = QuestionCategory.TECHNICAL,
    keywords: list[str] | None = None,
) -> Question:
    return Question(
        id=question_id,
        text=text,
        category=category,
        expected_keywords=keywords or [],
    )


def make_evaluation(
    score: int,
    strengths: list[str] | None = None,
    weaknesses: list[str] | None = None,
    suggestions: list[str] | None = None,
) -> Evaluation:
    return Evaluation(
        score=score,
        confidence=score,
        relevance=score,
        clarity=score,
        feedback=EvaluationFeedback(
            strengths=strengths or [],
            weaknesses=weaknesses or [],
            suggestions=suggestions or [],
        ),
        content_source=EvaluationSource.HEURISTIC,
    )


def content_score(score: int) -> ContentScore:
    return ContentScore(
        score=score,
        confidence=score,
        relevance=score,
        clarity=score,
        feedback=EvaluationFeedback(strengths=["Clear explanation"]),
        source=EvaluationSource.AI,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def make_orchestrator(store, clock):
    """Build an orchestrator over the in-memory store with deterministic collaborators."""

    def _build(ai=None, rate_limiter=None, media_analyzer=None, audio_processor=None):
        return InterviewOrchestrator(
            session_store=store,
            question_provider=QuestionProvider(
                ai_reasoning=ai,
                question_bank=QuestionBank(seed=7),
            ),
            evaluation_engine=EvaluationEngine(
                ai_reasoning=ai,
                media_analyzer=media_analyzer or MediaAnalyzer(seed=1),
                audio_processor=audio_processor,
            ),
            company_recommender=CompanyRecommender(ai),
            rate_limiter=rate_limiter,
            clock=clock,
        )

    return _build


@pytest.fixture
def orchestrator(make_orchestrator):
    return make_orchestrator()
