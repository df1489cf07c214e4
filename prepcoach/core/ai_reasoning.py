"""
AI Reasoning Layer for PrepCoach

Handles all generative-model operations:
- Question generation
- Content scoring (text-only and multimodal-aware)
- Correctness evaluation with an ideal answer
- Company recommendations

Every method raises on failure or malformed output. Callers own the
fallbacks. Integrated with Langfuse for observability and tracing.
"""

import json
import logging
import math
from typing import Any

import httpx
from langfuse import Langfuse

from prepcoach.config.settings import get_settings
from prepcoach.core.exceptions import AIUnavailableError
from prepcoach.core.heuristics import match_keywords
from prepcoach.models.evaluation import (
    ContentScore,
    CorrectnessResult,
    EvaluationFeedback,
    EvaluationSource,
    ImprovementArea,
    KeywordMatch,
    MediaSignals,
)
from prepcoach.models.interview import InterviewSession
from prepcoach.models.performance import CompanyRecommendation
from prepcoach.models.profile import CandidateProfile, ResumeContext
from prepcoach.models.question import Question
from prepcoach.prompts.evaluator import EvaluatorPrompts
from prepcoach.prompts.interviewer import InterviewerPrompts
from prepcoach.prompts.report import ReportPrompts

logger = logging.getLogger(__name__)


class AIReasoningLayer:
    """
    Central AI reasoning component talking to a chat-completions gateway.

    When no gateway is configured the layer reports itself unavailable
    and every call raises AIUnavailableError immediately.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        langfuse: Langfuse | None = None,
    ):
        """
        Initialize AI reasoning layer.

        Args:
            client: Pre-built HTTP client (tests inject one with a mock transport)
            langfuse: Pre-built Langfuse client
        """
        self.settings = get_settings()

        self.client = client
        if self.client is None and self.settings.llm_configured:
            self.client = httpx.AsyncClient(
                base_url=self.settings.llm_base_url.rstrip("/"),
                headers={
                    "Authorization": f"Bearer {self.settings.llm_api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.settings.llm_timeout_seconds,
            )

        # Prompt templates
        self.interviewer_prompts = InterviewerPrompts()
        self.evaluator_prompts = EvaluatorPrompts()
        self.report_prompts = ReportPrompts()

        # Initialize Langfuse for observability
        self.langfuse = langfuse
        if self.langfuse is None and self.settings.langfuse_enabled:
            if self.settings.langfuse_secret_key and self.settings.langfuse_public_key:
                try:
                    self.langfuse = Langfuse(
                        secret_key=self.settings.langfuse_secret_key,
                        public_key=self.settings.langfuse_public_key,
                        host=self.settings.langfuse_host,
                    )
                    logger.info("Langfuse initialized for LLM observability")
                except Exception as e:
                    logger.warning(f"Failed to initialize Langfuse: {e}")
            else:
                logger.info("Langfuse keys not configured, tracing disabled")

    @property
    def is_available(self) -> bool:
        return self.client is not None

    async def close(self):
        """Close the HTTP client and flush Langfuse."""
        if self.client is not None:
            await self.client.aclose()
        if self.langfuse:
            try:
                self.langfuse.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    # =========================================================================
    # CORE AI OPERATIONS
    # =========================================================================

    def _extract_content(self, result: dict) -> str:
        """Extract text content from API response, handling list/dict formats."""
        content = result.get("choices", [{}])[0].get("message", {}).get("content", "")

        # Handle case where content is a list (multi-part response)
        if isinstance(content, list):
            text_parts = []
            for part in content:
                if isinstance(part, str):
                    text_parts.append(part)
                elif isinstance(part, dict) and "text" in part:
                    text_parts.append(part["text"])
            content = "".join(text_parts)

        return content if isinstance(content, str) else str(content)

    def _extract_json(self, response: str) -> Any:
        """Pull the outermost JSON object or array out of a model response."""
        object_start = response.find("{")
        array_start = response.find("[")

        if array_start >= 0 and (object_start < 0 or array_start < object_start):
            start, end = array_start, response.rfind("]") + 1
        else:
            start, end = object_start, response.rfind("}") + 1

        if start < 0 or end <= start:
            raise AIUnavailableError("Model response contained no JSON")

        try:
            return json.loads(response[start:end])
        except json.JSONDecodeError as e:
            raise AIUnavailableError(f"Model response was not valid JSON: {e}") from e

    def _start_span(self, name: str, metadata: dict[str, Any]) -> Any:
        if not self.langfuse:
            return None
        try:
            return self.langfuse.start_span(name=name, metadata=metadata)
        except Exception as lf_err:
            logger.warning(f"Langfuse span start failed: {lf_err}")
            return None

    def _end_span(self, span: Any, output: dict[str, Any]) -> None:
        if span is None:
            return
        try:
            span.update(output=output)
            span.end()
        except Exception as lf_err:
            logger.warning(f"Langfuse span end failed: {lf_err}")

    async def _call_model(
        self,
        prompt: str,
        max_tokens: int = 2048,
        trace_name: str = "llm_call",
        trace_metadata: dict | None = None,
    ) -> str:
        """
        Send one prompt to the model gateway.

        Args:
            prompt: The prompt to send
            max_tokens: Maximum tokens in response
            trace_name: Name for Langfuse span
            trace_metadata: Additional metadata for the span

        Returns:
            Model response text
        """
        if not self.is_available:
            raise AIUnavailableError("No model gateway configured")

        span = self._start_span(trace_name, trace_metadata or {})

        payload = {
            "model": self.settings.llm_model,
            "messages": [
                {"role": "user", "content": prompt}
            ],
            "max_tokens": max_tokens,
            "temperature": self.settings.llm_temperature,
        }

        try:
            response = await self.client.post(self.settings.llm_endpoint, json=payload)
            response.raise_for_status()
            content = self._extract_content(response.json())
        except httpx.HTTPError as e:
            logger.error(f"Model gateway error ({trace_name}): {e}")
            self._end_span(span, {"error": str(e)})
            raise
        except (ValueError, AttributeError, IndexError) as e:
            logger.error(f"Malformed model gateway response ({trace_name}): {e}")
            self._end_span(span, {"error": str(e)})
            raise AIUnavailableError(f"Malformed model gateway response: {e}") from e

        self._end_span(span, {"response_length": len(content)})
        return content

    # =========================================================================
    # QUESTION GENERATION
    # =========================================================================

    async def generate_questions(
        self,
        profile: CandidateProfile | None,
        resume: ResumeContext | None,
        interview_type: str,
        subject: str,
        difficulty: str,
        count: int,
        previously_asked: list[str],
    ) -> list[dict[str, Any]]:
        """
        Generate raw question dicts.

        Returns:
            List of dicts with at least a non-empty "text"
        """
        prompt = self.interviewer_prompts.generate_questions_prompt(
            profile=profile,
            resume=resume,
            interview_type=interview_type,
            subject=subject,
            difficulty=difficulty,
            count=count,
            previously_asked=previously_asked,
        )

        response = await self._call_model(
            prompt,
            max_tokens=4096,
            trace_name="question_generation_llm",
            trace_metadata={
                "interview_type": interview_type,
                "subject": subject,
                "count": count,
                "previously_asked": len(previously_asked),
            },
        )

        data = self._extract_json(response)
        items = data.get("questions", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise AIUnavailableError("Question response had no question list")

        questions = []
        for item in items:
            if isinstance(item, str):
                item = {"text": item}
            if isinstance(item, dict):
                text = str(item.get("text") or item.get("question") or "").strip()
                if text:
                    questions.append({**item, "text": text})

        if not questions:
            raise AIUnavailableError("Question response contained no usable questions")

        logger.info(f"Model generated {len(questions)} questions ({interview_type}/{subject})")
        return questions

    # =========================================================================
    # CONTENT SCORING
    # =========================================================================

    async def score_content(
        self,
        question: Question,
        answer_text: str,
        expected_keywords: list[str],
        media: MediaSignals | None = None,
    ) -> ContentScore:
        """
        Score the content of an answer.

        With media signals the multimodal-aware prompt is tried first and
        the plain prompt is used if that attempt fails.
        """
        if media is not None and not media.is_empty:
            try:
                return await self._score_content(question, answer_text, expected_keywords, media)
            except Exception as e:
                logger.warning(f"Multimodal content scoring failed, retrying text-only: {e}")

        return await self._score_content(question, answer_text, expected_keywords, None)

    async def _score_content(
        self,
        question: Question,
        answer_text: str,
        expected_keywords: list[str],
        media: MediaSignals | None,
    ) -> ContentScore:
        prompt = self.evaluator_prompts.generate_content_prompt(
            question=question,
            answer=answer_text,
            expected_keywords=expected_keywords,
            media=media,
        )

        response = await self._call_model(
            prompt,
            max_tokens=1024,
            trace_name="content_scoring_llm",
            trace_metadata={
                "question_id": question.id,
                "multimodal": media is not None,
                "answer_length": len(answer_text),
            },
        )

        content = self._parse_content_score(response, answer_text, expected_keywords)
        logger.info(f"Content scored by model: question={question.id} score={content.score}")
        return content

    def _parse_content_score(
        self,
        response: str,
        answer_text: str,
        expected_keywords: list[str],
    ) -> ContentScore:
        """Parse AI response into ContentScore. Raises on malformed output."""
        data = self._extract_json(response)
        if not isinstance(data, dict) or not _is_number(data.get("score")):
            raise AIUnavailableError("Content response had no numeric score")

        score = data["score"]
        feedback = data.get("feedback") if isinstance(data.get("feedback"), dict) else {}
        keywords = data.get("keywords") if isinstance(data.get("keywords"), dict) else None

        strengths = _string_list(feedback.get("strengths")) or ["Provided a response"]

        if keywords is not None:
            keyword_match = KeywordMatch(
                found=_string_list(keywords.get("found")),
                missing=_string_list(keywords.get("missing")),
            )
        else:
            keyword_match = match_keywords(answer_text, expected_keywords)

        return ContentScore(
            score=score,
            relevance=_number_or(data.get("relevance"), score),
            clarity=_number_or(data.get("clarity"), score),
            confidence=_number_or(data.get("confidence"), score),
            feedback=EvaluationFeedback(
                strengths=strengths,
                weaknesses=_string_list(feedback.get("weaknesses")),
                suggestions=_string_list(feedback.get("suggestions")),
            ),
            keywords=keyword_match,
            source=EvaluationSource.AI,
        )

    # =========================================================================
    # CORRECTNESS
    # =========================================================================

    async def evaluate_correctness(
        self,
        question: Question,
        answer_text: str,
        category: str,
        difficulty: str,
        subject: str,
    ) -> CorrectnessResult:
        """Judge factual correctness and produce the ideal answer."""
        prompt = self.evaluator_prompts.generate_correctness_prompt(
            question=question,
            answer=answer_text,
            category=category,
            difficulty=difficulty,
            subject=subject,
        )

        response = await self._call_model(
            prompt,
            max_tokens=2048,
            trace_name="correctness_llm",
            trace_metadata={
                "question_id": question.id,
                "category": category,
                "subject": subject,
            },
        )

        result = self._parse_correctness(response)
        logger.info(
            f"Correctness judged by model: question={question.id} "
            f"score={result.correctness_score} correct={result.is_correct}"
        )
        return result

    def _parse_correctness(self, response: str) -> CorrectnessResult:
        """Parse AI response into CorrectnessResult. Raises on malformed output."""
        data = self._extract_json(response)
        if not isinstance(data, dict) or not _is_number(data.get("correctness_score")):
            raise AIUnavailableError("Correctness response had no numeric score")

        score = data["correctness_score"]
        is_correct = data.get("is_correct")
        if not isinstance(is_correct, bool):
            is_correct = score >= 50

        areas = []
        for item in data.get("improvement_areas") or []:
            if isinstance(item, dict) and item.get("area"):
                try:
                    areas.append(ImprovementArea.model_validate(item))
                except ValueError as e:
                    logger.debug(f"Skipping malformed improvement area: {e}")

        correct_answer = data.get("correct_answer")
        return CorrectnessResult(
            correct_answer=correct_answer if isinstance(correct_answer, str) and correct_answer.strip() else None,
            key_points=_string_list(data.get("key_points")),
            common_mistakes=_string_list(data.get("common_mistakes")),
            is_correct=is_correct,
            correctness_score=score,
            key_points_covered=_string_list(data.get("key_points_covered")),
            key_points_missed=_string_list(data.get("key_points_missed")),
            mistakes_made=_string_list(data.get("mistakes_made")),
            improvement_areas=areas,
        )

    # =========================================================================
    # COMPANY RECOMMENDATIONS
    # =========================================================================

    async def recommend_companies(
        self,
        profile: CandidateProfile | None,
        session: InterviewSession,
        resume: ResumeContext | None,
    ) -> list[CompanyRecommendation]:
        prompt = self.report_prompts.generate_company_recommendations_prompt(
            profile=profile,
            session=session,
            resume=resume,
        )

        response = await self._call_model(
            prompt,
            max_tokens=2048,
            trace_name="company_recommendations_llm",
            trace_metadata={"session_id": session.id},
        )

        data = self._extract_json(response)
        items = data.get("companies", []) if isinstance(data, dict) else data
        companies = [
            CompanyRecommendation(
                name=str(item["name"]),
                reason=str(item.get("reason", "")),
                match_score=item.get("match_score", 0) if _is_number(item.get("match_score")) else 0,
            )
            for item in items or []
            if isinstance(item, dict) and item.get("name")
        ]

        if not companies:
            raise AIUnavailableError("Recommendation response contained no companies")
        return companies


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _number_or(value: Any, default: float) -> float:
    return value if _is_number(value) else default


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float)) and str(item).strip()]
