"""
Question Provider for PrepCoach

Produces exactly the requested number of questions for a session.
The generative model is tried first; any failure or shortfall is made
up from the static question bank, so generation never fails.
"""

import logging
import time
from typing import Any

from prepcoach.core.question_bank import QuestionBank
from prepcoach.models.interview import InterviewDifficulty, InterviewType, Subject
from prepcoach.models.profile import CandidateProfile, ResumeContext
from prepcoach.models.question import Question, QuestionCategory, QuestionDifficulty

logger = logging.getLogger(__name__)

DEFAULT_TIME_LIMIT = 120


class QuestionProvider:
    """Generates question batches, falling back to static pools."""

    def __init__(
        self,
        ai_reasoning: Any = None,  # AIReasoningLayer
        question_bank: QuestionBank | None = None,
    ):
        self.ai_reasoning = ai_reasoning
        self.question_bank = question_bank or QuestionBank()

    async def generate(
        self,
        profile: CandidateProfile | None,
        resume: ResumeContext | None,
        interview_type: InterviewType,
        subject: Subject,
        difficulty: InterviewDifficulty,
        count: int,
        previously_asked: list[str] | None = None,
    ) -> list[Question]:
        """
        Generate exactly `count` questions.

        Args:
            profile: Candidate profile
            resume: Optional resume context
            interview_type: Interview type
            subject: Subject tag
            difficulty: Session difficulty
            count: Number of questions required
            previously_asked: Texts to avoid, best-effort

        Returns:
            Ordered questions with ids unique within the batch
        """
        previously_asked = previously_asked or []
        asked = {_normalize(text) for text in previously_asked}

        raw: list[dict[str, Any]] = []
        if self.ai_reasoning is not None:
            try:
                generated = await self.ai_reasoning.generate_questions(
                    profile=profile,
                    resume=resume,
                    interview_type=interview_type.value,
                    subject=subject.value,
                    difficulty=difficulty.value,
                    count=count,
                    previously_asked=previously_asked,
                )
                seen = set(asked)
                for item in generated:
                    key = _normalize(item["text"])
                    if key in seen:
                        logger.warning(f"Dropping repeated question from model: '{item['text'][:50]}...'")
                        continue
                    seen.add(key)
                    raw.append(item)
            except Exception as e:
                logger.warning(f"Question generation failed, using static pool: {e}")

        raw = raw[:count]
        if len(raw) < count:
            if raw:
                logger.info(f"Model returned {len(raw)}/{count} questions; topping up from static pool")
            exclude = previously_asked + [item["text"] for item in raw]
            for text in self.question_bank.draw(
                interview_type.value,
                subject.value,
                count - len(raw),
                exclude,
            ):
                raw.append({"text": text})

        return self._build_questions(raw, interview_type, difficulty)

    def _build_questions(
        self,
        raw: list[dict[str, Any]],
        interview_type: InterviewType,
        difficulty: InterviewDifficulty,
    ) -> list[Question]:
        timestamp = int(time.time() * 1000)
        default_category = interview_type.question_category
        default_difficulty = difficulty.question_difficulty

        questions = []
        for index, item in enumerate(raw):
            questions.append(Question(
                id=f"q_{timestamp}_{index}",
                text=item["text"],
                category=_enum_or(QuestionCategory, item.get("category"), default_category),
                difficulty=_enum_or(QuestionDifficulty, item.get("difficulty"), default_difficulty),
                expected_keywords=_keywords(item.get("expected_keywords")),
                time_limit=_time_limit(item.get("time_limit")),
                order=index,
            ))
        return questions


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())


def _enum_or(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _time_limit(value: Any) -> int:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 10:
        return int(value)
    return DEFAULT_TIME_LIMIT


def _keywords(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(kw).strip() for kw in value if str(kw).strip()]
