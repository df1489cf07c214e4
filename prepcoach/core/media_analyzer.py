"""
Media Analysis for PrepCoach

Derives structured video and audio signal blocks from a recording
reference. Uses a remote analysis service when one is configured and
synthesises signals otherwise.

Synthesised signals come from a random generator seeded with the
configured seed and the media reference, so the same recording always
yields the same block.
"""

import logging
import random
import re

import httpx

from prepcoach.config.settings import get_settings
from prepcoach.models.evaluation import (
    AudioSignal,
    BodyLanguage,
    EyeContact,
    FacialExpressions,
    FillerWords,
    PaceRating,
    PauseStats,
    SpeechPace,
    VideoSignal,
    VocalTone,
    VolumeStats,
)

logger = logging.getLogger(__name__)

FILLER_WORDS = ["um", "uh", "like", "you know", "actually", "basically", "literally"]

DEFAULT_WORD_COUNT = 150
DEFAULT_DURATION_SECONDS = 120
SLOW_PACE_WPM = 120
FAST_PACE_WPM = 180


class MediaAnalyzer:
    """
    Media signal extraction.

    Never raises: any failure of the remote service degrades to
    synthesised signals.
    """

    def __init__(
        self,
        seed: int | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = get_settings()
        self.seed = seed if seed is not None else self.settings.media_random_seed
        self.mock_mode = not self.settings.media_analysis_url

        self.client = client
        if self.client is None and not self.mock_mode:
            self.client = httpx.AsyncClient(
                base_url=self.settings.media_analysis_url.rstrip("/"),
                headers={"Authorization": f"Bearer {self.settings.media_analysis_api_key}"},
                timeout=self.settings.media_download_timeout_seconds,
            )

    async def close(self):
        if self.client is not None:
            await self.client.aclose()

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    async def analyze_video(self, ref: str, duration_seconds: float = 0) -> VideoSignal:
        """
        Analyse a video recording for non-verbal communication.

        Args:
            ref: Recording reference (URL or storage key)
            duration_seconds: Recording length, 0 if unknown

        Returns:
            VideoSignal with recommendations attached
        """
        signal = None
        if not self.mock_mode:
            try:
                signal = await self._fetch_video(ref, duration_seconds)
            except Exception as e:
                logger.warning(f"Video analysis service failed for {ref}, synthesising: {e}")

        if signal is None:
            signal = self._mock_video(ref)

        signal.recommendations = video_recommendations(signal)
        return signal

    async def analyze_audio(
        self,
        ref: str,
        transcript: str | None = None,
        duration_seconds: float = 0,
    ) -> AudioSignal:
        """
        Analyse an audio track for speech patterns.

        Args:
            ref: Recording reference (audio file or the video carrying the track)
            transcript: Transcript, if one is available
            duration_seconds: Recording length, 0 if unknown

        Returns:
            AudioSignal with recommendations attached
        """
        signal = None
        if not self.mock_mode:
            try:
                signal = await self._fetch_audio(ref, transcript, duration_seconds)
            except Exception as e:
                logger.warning(f"Audio analysis service failed for {ref}, synthesising: {e}")

        if signal is None:
            signal = self._mock_audio(ref, transcript, duration_seconds)

        signal.recommendations = audio_recommendations(signal)
        return signal

    # =========================================================================
    # REMOTE SERVICE
    # =========================================================================

    async def _fetch_video(self, ref: str, duration_seconds: float) -> VideoSignal:
        response = await self.client.post(
            "/video",
            json={"url": ref, "duration": duration_seconds},
        )
        response.raise_for_status()
        return VideoSignal.model_validate(response.json())

    async def _fetch_audio(
        self,
        ref: str,
        transcript: str | None,
        duration_seconds: float,
    ) -> AudioSignal:
        response = await self.client.post(
            "/audio",
            json={"url": ref, "transcript": transcript or "", "duration": duration_seconds},
        )
        response.raise_for_status()
        return AudioSignal.model_validate(response.json())

    # =========================================================================
    # SYNTHESISED SIGNALS
    # =========================================================================

    def _rng(self, kind: str, ref: str) -> random.Random:
        return random.Random(f"{self.seed}:{kind}:{ref}")

    def _mock_video(self, ref: str) -> VideoSignal:
        rng = self._rng("video", ref)
        base = 60 + rng.random() * 30

        return VideoSignal(
            facial_expressions=FacialExpressions(
                confidence=base + rng.random() * 15,
                engagement=base + rng.random() * 10,
                stress=30 + rng.random() * 20,
                positivity=base + rng.random() * 20,
            ),
            eye_contact=EyeContact(
                score=base + rng.random() * 15,
                percentage=65 + rng.random() * 25,
                notes="Good eye contact maintained throughout most of the response",
            ),
            body_language=BodyLanguage(
                posture=base + rng.random() * 15,
                gestures=base + rng.random() * 10,
                movement="Controlled and professional",
                notes="Good posture with appropriate hand gestures to emphasize key points",
            ),
            overall=base,
        )

    def _mock_audio(
        self,
        ref: str,
        transcript: str | None,
        duration_seconds: float,
    ) -> AudioSignal:
        rng = self._rng("audio", ref)
        base = 65 + rng.random() * 25

        word_count = len(transcript.split()) if transcript else DEFAULT_WORD_COUNT
        duration = duration_seconds or DEFAULT_DURATION_SECONDS
        words_per_minute = round(word_count / duration * 60)

        if words_per_minute < SLOW_PACE_WPM:
            pace = SpeechPace(words_per_minute=words_per_minute, rating=PaceRating.TOO_SLOW, score=60)
        elif words_per_minute > FAST_PACE_WPM:
            pace = SpeechPace(words_per_minute=words_per_minute, rating=PaceRating.TOO_FAST, score=65)
        else:
            pace = SpeechPace(words_per_minute=words_per_minute, rating=PaceRating.OPTIMAL, score=85)

        fillers = count_filler_words(transcript or "")
        filler_count = sum(fillers.values())

        return AudioSignal(
            speech_clarity=base + rng.random() * 10,
            pace=pace,
            tone=VocalTone(
                confidence=base + rng.random() * 15,
                enthusiasm=base + rng.random() * 10,
                professionalism=base + rng.random() * 12,
            ),
            filler_words=FillerWords(
                count=filler_count,
                types=list(fillers),
                frequency=filler_count / word_count * 100 if word_count else 0,
            ),
            pauses=PauseStats(
                count=round(duration / 20),
                average_duration=round(1.5 + rng.random(), 2),
                appropriateness=base + rng.random() * 15,
            ),
            volume=VolumeStats(
                average=65 + rng.random() * 20,
                consistency=base + rng.random() * 15,
            ),
            overall=base,
        )


def count_filler_words(transcript: str) -> dict[str, int]:
    """Occurrences of each filler word found, in detection order."""
    lowered = transcript.lower()
    counts = {}
    for filler in FILLER_WORDS:
        matches = re.findall(rf"\b{re.escape(filler)}\b", lowered)
        if matches:
            counts[filler] = len(matches)
    return counts


def video_recommendations(video: VideoSignal) -> list[str]:
    recommendations = []
    if video.eye_contact.score < 70:
        recommendations.append(
            "Improve eye contact: look directly at the camera more frequently"
        )
    if video.body_language.posture < 70:
        recommendations.append(
            "Improve posture: sit up straight and keep an open, confident posture"
        )
    if video.facial_expressions.stress > 60:
        recommendations.append(
            "Manage stress indicators: practice relaxation techniques before interviews"
        )
    return recommendations


def audio_recommendations(audio: AudioSignal) -> list[str]:
    recommendations = []
    wpm = audio.pace.words_per_minute
    if audio.pace.rating == PaceRating.TOO_FAST:
        recommendations.append(f"Slow down: you spoke at {wpm} WPM, aim for 130-160 WPM")
    elif audio.pace.rating == PaceRating.TOO_SLOW:
        recommendations.append(f"Speed up slightly: you spoke at {wpm} WPM")
    if audio.filler_words.count > 5:
        recommendations.append(
            f"Reduce filler words: {audio.filler_words.count} used "
            f"({', '.join(audio.filler_words.types)}), pause instead"
        )
    if audio.tone.confidence < 70:
        recommendations.append("Speak with more confidence: use a stronger, more assertive tone")
    if audio.speech_clarity < 70:
        recommendations.append("Improve speech clarity: enunciate and avoid mumbling")
    return recommendations
