"""
Evaluation models for PrepCoach

Defines the bounded score bundle attached to every answer, the media
signal blocks and the intermediate results of content and correctness
scoring.
"""

import math
from enum import Enum
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
)

from prepcoach.models.question import QuestionEnrichment


def clamp_score(value: Any) -> Any:
    """Coerce numeric input to an int in [0, 100]. Non-numeric input is left for validation."""
    if value is None or isinstance(value, bool):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    if math.isnan(number):
        return value
    return max(0, min(100, round(number)))


Score = Annotated[int, BeforeValidator(clamp_score)]


class EvaluationSource(str, Enum):
    """Which stage of the cascade produced the content score."""

    AI = "ai"
    HEURISTIC = "heuristic"
    MEDIA_ONLY = "media_only"


# ============================================================================
# FEEDBACK
# ============================================================================

class EvaluationFeedback(BaseModel):
    """Qualitative feedback for a response."""

    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class KeywordMatch(BaseModel):
    """Expected keywords found in, or missing from, the answer."""

    found: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class ImprovementPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ImprovementArea(BaseModel):
    """A prioritised area the candidate should work on."""

    area: str
    priority: ImprovementPriority = ImprovementPriority.MEDIUM
    suggestion: str = ""
    impact: str = ""


# ============================================================================
# MEDIA SIGNALS
# ============================================================================

class FacialExpressions(BaseModel):
    confidence: Score = 0
    engagement: Score = 0
    stress: Score = 0
    positivity: Score = 0


class EyeContact(BaseModel):
    score: Score = 0
    percentage: Score = 0
    notes: str = ""


class BodyLanguage(BaseModel):
    posture: Score = 0
    gestures: Score = 0
    movement: str = ""
    notes: str = ""


class VideoSignal(BaseModel):
    """Signals derived from a video recording."""

    facial_expressions: FacialExpressions = Field(default_factory=FacialExpressions)
    eye_contact: EyeContact = Field(default_factory=EyeContact)
    body_language: BodyLanguage = Field(default_factory=BodyLanguage)
    overall: Score = 0
    recommendations: list[str] = Field(default_factory=list)


class PaceRating(str, Enum):
    TOO_SLOW = "too-slow"
    OPTIMAL = "optimal"
    TOO_FAST = "too-fast"


class SpeechPace(BaseModel):
    words_per_minute: int = Field(default=0, ge=0)
    rating: PaceRating = PaceRating.OPTIMAL
    score: Score = 0


class VocalTone(BaseModel):
    confidence: Score = 0
    enthusiasm: Score = 0
    professionalism: Score = 0


class FillerWords(BaseModel):
    count: int = Field(default=0, ge=0)
    types: list[str] = Field(default_factory=list)
    frequency: Score = Field(default=0, description="Fillers per 100 words")


class PauseStats(BaseModel):
    count: int = Field(default=0, ge=0)
    average_duration: float = Field(default=0.0, ge=0)
    appropriateness: Score = 0


class VolumeStats(BaseModel):
    average: Score = 0
    consistency: Score = 0


class AudioSignal(BaseModel):
    """Signals derived from an audio track (standalone or from a video)."""

    speech_clarity: Score = 0
    pace: SpeechPace = Field(default_factory=SpeechPace)
    tone: VocalTone = Field(default_factory=VocalTone)
    filler_words: FillerWords = Field(default_factory=FillerWords)
    pauses: PauseStats = Field(default_factory=PauseStats)
    volume: VolumeStats = Field(default_factory=VolumeStats)
    overall: Score = 0
    recommendations: list[str] = Field(default_factory=list)


class MediaSignals(BaseModel):
    """The signal blocks available for one answer. Absent blocks stay None."""

    video: VideoSignal | None = None
    audio: AudioSignal | None = None

    @property
    def is_empty(self) -> bool:
        return self.video is None and self.audio is None

    def overall_scores(self) -> list[int]:
        """Overall scores of the blocks that are present."""
        scores = []
        if self.video is not None:
            scores.append(self.video.overall)
        if self.audio is not None:
            scores.append(self.audio.overall)
        return scores


# ============================================================================
# CONTENT AND CORRECTNESS
# ============================================================================

class ContentScore(BaseModel):
    """Content-level scoring of an answer's text."""

    score: Score
    confidence: Score
    relevance: Score
    clarity: Score
    feedback: EvaluationFeedback = Field(default_factory=EvaluationFeedback)
    keywords: KeywordMatch = Field(default_factory=KeywordMatch)
    source: EvaluationSource = EvaluationSource.AI


class Correctness(BaseModel):
    """Factual correctness verdict stored on an evaluation."""

    is_correct: bool = False
    correctness_score: Score = 0
    key_points_covered: list[str] = Field(default_factory=list)
    key_points_missed: list[str] = Field(default_factory=list)
    mistakes_made: list[str] = Field(default_factory=list)


class CorrectnessResult(BaseModel):
    """Full output of the correctness stage, including the ideal answer."""

    correct_answer: str | None = None
    key_points: list[str] = Field(default_factory=list)
    common_mistakes: list[str] = Field(default_factory=list)

    is_correct: bool = False
    correctness_score: Score = 0
    key_points_covered: list[str] = Field(default_factory=list)
    key_points_missed: list[str] = Field(default_factory=list)
    mistakes_made: list[str] = Field(default_factory=list)
    improvement_areas: list[ImprovementArea] = Field(default_factory=list)

    def to_correctness(self) -> Correctness:
        return Correctness(
            is_correct=self.is_correct,
            correctness_score=self.correctness_score,
            key_points_covered=self.key_points_covered,
            key_points_missed=self.key_points_missed,
            mistakes_made=self.mistakes_made,
        )

    def to_enrichment(self, question_id: str) -> QuestionEnrichment | None:
        """Question enrichment, if an ideal answer was produced."""
        if not self.correct_answer:
            return None
        return QuestionEnrichment(
            question_id=question_id,
            correct_answer=self.correct_answer,
            key_points=self.key_points,
            common_mistakes=self.common_mistakes,
        )


# ============================================================================
# EVALUATION
# ============================================================================

class Evaluation(BaseModel):
    """The scored verdict attached to one answer."""

    score: Score = Field(..., description="Final score after multimodal combination")
    confidence: Score
    relevance: Score
    clarity: Score

    feedback: EvaluationFeedback = Field(default_factory=EvaluationFeedback)
    keywords: KeywordMatch = Field(default_factory=KeywordMatch)

    # Optional signal blocks; omitted when the modality was not submitted
    video_analysis: VideoSignal | None = None
    audio_analysis: AudioSignal | None = None
    transcript: str | None = None
    multimodal_score: Score | None = None

    correctness: Correctness | None = None
    improvement_areas: list[ImprovementArea] = Field(default_factory=list)

    content_source: EvaluationSource = EvaluationSource.AI

    @model_serializer(mode="wrap")
    def _omit_absent_blocks(self, handler: SerializerFunctionWrapHandler):
        data = handler(self)
        for key in OPTIONAL_BLOCKS:
            if data.get(key) is None:
                data.pop(key, None)
        return data


OPTIONAL_BLOCKS = ("video_analysis", "audio_analysis", "transcript", "multimodal_score", "correctness")
