"""
Evaluation Engine for PrepCoach

Scores a single answer through an ordered fallback cascade:

1. Transcription, when only a recording was submitted
2. Media signal extraction (video and audio, concurrently)
3. Content scoring by the model, or the deterministic heuristic
4. Correctness judgment by the model, or keyword overlap
5. Media-only scoring when there is no text at all

Upstream failures never escape this module. The evaluator does not
touch the session: question enrichment is returned to the caller.
"""

import asyncio
import logging
from typing import Any

from pydantic import BaseModel

from prepcoach.core.heuristics import (
    evaluate_correctness_heuristically,
    score_content_heuristically,
    score_media_only,
)
from prepcoach.core.score_combiner import combine_scores
from prepcoach.models.evaluation import (
    AudioSignal,
    ContentScore,
    CorrectnessResult,
    Evaluation,
    MediaSignals,
    VideoSignal,
)
from prepcoach.models.interview import AnswerSubmission
from prepcoach.models.question import Question, QuestionEnrichment

logger = logging.getLogger(__name__)


class EvaluationOutcome(BaseModel):
    """Everything evaluation produced for one answer."""

    answer_text: str
    transcript: str | None = None
    evaluation: Evaluation
    enrichment: QuestionEnrichment | None = None


class EvaluationEngine:
    """
    Central evaluation component for interview answers.

    Responsibilities:
    - Run the fallback cascade for one answer
    - Combine content and media scores
    - Report question enrichment without applying it
    """

    def __init__(
        self,
        ai_reasoning: Any = None,  # AIReasoningLayer
        media_analyzer: Any = None,  # MediaAnalyzer
        audio_processor: Any = None,  # AudioProcessor
    ):
        """
        Initialize evaluation engine.

        Args:
            ai_reasoning: Content and correctness scoring via the model
            media_analyzer: Video and audio signal extraction
            audio_processor: Speech-to-text for recordings
        """
        self.ai_reasoning = ai_reasoning
        self.media_analyzer = media_analyzer
        self.audio_processor = audio_processor

    # =========================================================================
    # ANSWER EVALUATION
    # =========================================================================

    async def evaluate_answer(
        self,
        question: Question,
        submission: AnswerSubmission,
        subject: str = "general",
    ) -> EvaluationOutcome:
        """
        Evaluate one answer.

        Args:
            question: The question being answered
            submission: Validated answer input
            subject: Session subject tag

        Returns:
            EvaluationOutcome with the bounded evaluation and any enrichment
        """
        text = submission.clean_text
        media_ref = submission.media_ref

        transcript = None
        if not text and media_ref:
            transcript = await self._transcribe(media_ref)

        content_text = text or transcript or ""
        signals = await self._extract_signals(submission, content_text)

        correctness: CorrectnessResult | None = None
        if content_text:
            content, correctness = await asyncio.gather(
                self._score_content(question, content_text, signals),
                self._evaluate_correctness(question, content_text, subject),
            )
        else:
            logger.info(f"No usable text for question {question.id}; scoring media only")
            content = score_media_only(signals, question)

        video_overall = signals.video.overall if signals.video else None
        audio_overall = signals.audio.overall if signals.audio else None
        combined = combine_scores(content.score, video_overall, audio_overall)

        evaluation = Evaluation(
            score=combined,
            confidence=content.confidence,
            relevance=content.relevance,
            clarity=content.clarity,
            feedback=content.feedback,
            keywords=content.keywords,
            video_analysis=signals.video,
            audio_analysis=signals.audio,
            transcript=transcript,
            multimodal_score=None if signals.is_empty else combined,
            correctness=correctness.to_correctness() if correctness else None,
            improvement_areas=correctness.improvement_areas if correctness else [],
            content_source=content.source,
        )

        logger.info(
            f"Evaluated question {question.id}: score={evaluation.score} "
            f"source={content.source.value} media={'none' if signals.is_empty else 'yes'}"
        )

        return EvaluationOutcome(
            answer_text=content_text or submission.placeholder_text(),
            transcript=transcript,
            evaluation=evaluation,
            enrichment=correctness.to_enrichment(question.id) if correctness else None,
        )

    # =========================================================================
    # CASCADE STAGES
    # =========================================================================

    async def _transcribe(self, media_ref: str) -> str | None:
        if self.audio_processor is None:
            return None
        try:
            transcript = await self.audio_processor.transcribe_recording(media_ref)
        except Exception as e:
            logger.warning(f"Transcription failed for {media_ref}, continuing without transcript: {e}")
            return None
        transcript = (transcript or "").strip()
        return transcript or None

    async def _extract_signals(self, submission: AnswerSubmission, transcript: str) -> MediaSignals:
        if self.media_analyzer is None or not submission.media_ref:
            return MediaSignals()

        video_task = None
        if submission.video_url:
            video_task = self.media_analyzer.analyze_video(
                submission.video_url,
                submission.time_spent,
            )
        audio_task = self.media_analyzer.analyze_audio(
            submission.media_ref,
            transcript or None,
            submission.time_spent,
        )

        if video_task is not None:
            video, audio = await asyncio.gather(video_task, audio_task, return_exceptions=True)
        else:
            video = None
            (audio,) = await asyncio.gather(audio_task, return_exceptions=True)

        for kind, result in (("video", video), ("audio", audio)):
            if isinstance(result, Exception):
                logger.error(f"Media analyzer raised on {kind} for {submission.media_ref}: {result}")

        return MediaSignals(video=_as_video(video), audio=_as_audio(audio))

    async def _score_content(
        self,
        question: Question,
        answer_text: str,
        signals: MediaSignals,
    ) -> ContentScore:
        if self.ai_reasoning is not None:
            try:
                return await self.ai_reasoning.score_content(
                    question=question,
                    answer_text=answer_text,
                    expected_keywords=question.expected_keywords,
                    media=None if signals.is_empty else signals,
                )
            except Exception as e:
                logger.warning(f"Content scoring failed for {question.id}, using heuristic: {e}")

        return score_content_heuristically(answer_text, question)

    async def _evaluate_correctness(
        self,
        question: Question,
        answer_text: str,
        subject: str,
    ) -> CorrectnessResult:
        if self.ai_reasoning is not None:
            try:
                return await self.ai_reasoning.evaluate_correctness(
                    question=question,
                    answer_text=answer_text,
                    category=question.category.value,
                    difficulty=question.difficulty.value,
                    subject=subject,
                )
            except Exception as e:
                logger.warning(f"Correctness evaluation failed for {question.id}, using keywords: {e}")

        return evaluate_correctness_heuristically(answer_text, question, subject)


def _as_video(value: Any) -> VideoSignal | None:
    return value if isinstance(value, VideoSignal) else None


def _as_audio(value: Any) -> AudioSignal | None:
    return value if isinstance(value, AudioSignal) else None
