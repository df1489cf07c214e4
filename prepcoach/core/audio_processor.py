"""
Audio Processing Layer for PrepCoach

Speech-to-text for recorded answers using Whisper, either a local model
or a Whisper-compatible HTTP API. Recordings are referenced by URL and
downloaded before transcription.
"""

import asyncio
import logging
import tempfile
from pathlib import Path

import httpx

from prepcoach.config.settings import get_settings

logger = logging.getLogger(__name__)


class TranscriptionError(Exception):
    """Raised when a recording could not be transcribed."""
    pass


class AudioProcessor:
    """
    Transcribes answer recordings.

    Callers treat every failure as "no transcript"; nothing here is
    allowed to block answer evaluation.
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self.settings = get_settings()

        # Lazy-loaded model
        self._whisper_model = None

        self.client = client or httpx.AsyncClient(
            timeout=self.settings.media_download_timeout_seconds,
            follow_redirects=True,
        )

    async def close(self):
        """Clean up resources."""
        await self.client.aclose()

    @property
    def is_configured(self) -> bool:
        return self.settings.use_local_whisper or bool(self.settings.whisper_api_url)

    # =========================================================================
    # SPEECH-TO-TEXT (Whisper)
    # =========================================================================

    async def transcribe_recording(self, ref: str) -> str:
        """
        Download a recording and transcribe it.

        Args:
            ref: URL of the audio or video recording

        Returns:
            Transcript text (may be empty if nothing was said)

        Raises:
            TranscriptionError: If no backend is configured or transcription fails
        """
        if not self.is_configured:
            raise TranscriptionError("No speech-to-text backend configured")

        try:
            response = await self.client.get(ref)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TranscriptionError(f"Could not download recording {ref}: {e}") from e

        return await self.speech_to_text(response.content, self.settings.transcription_language)

    async def speech_to_text(self, audio_data: bytes, language: str = "en") -> str:
        """
        Transcribe audio to text using Whisper.

        Args:
            audio_data: Raw audio bytes
            language: Language code

        Returns:
            Transcribed text
        """
        if self.settings.use_local_whisper:
            return await self._transcribe_local(audio_data, language)
        return await self._transcribe_api(audio_data, language)

    async def _transcribe_local(self, audio_data: bytes, language: str) -> str:
        """Transcribe using local Whisper model."""
        if self._whisper_model is None:
            await self._load_whisper_model()

        with tempfile.NamedTemporaryFile(suffix=".media", delete=False) as f:
            f.write(audio_data)
            temp_path = f.name

        try:
            # Run transcription in thread pool to avoid blocking
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(
                None,
                self._run_whisper_transcription,
                temp_path,
                language,
            )
        except Exception as e:
            raise TranscriptionError(f"Local transcription failed: {e}") from e
        finally:
            Path(temp_path).unlink(missing_ok=True)

    async def _load_whisper_model(self):
        """Load Whisper model lazily."""
        try:
            import whisper
        except ImportError as e:
            logger.error("Whisper not installed. Install with: pip install prepcoach[local-stt]")
            raise TranscriptionError("Local Whisper is not installed") from e

        logger.info(f"Loading Whisper model: {self.settings.whisper_model}")

        loop = asyncio.get_running_loop()
        self._whisper_model = await loop.run_in_executor(
            None,
            whisper.load_model,
            self.settings.whisper_model.replace("whisper-", ""),
        )

        logger.info("Whisper model loaded successfully")

    def _run_whisper_transcription(self, audio_path: str, language: str) -> str:
        """Run Whisper transcription (blocking, runs in thread pool)."""
        result = self._whisper_model.transcribe(
            audio_path,
            language=language,
            fp16=False,
        )
        return result.get("text", "").strip()

    async def _transcribe_api(self, audio_data: bytes, language: str) -> str:
        """Transcribe using Whisper API."""
        try:
            response = await self.client.post(
                self.settings.whisper_api_url,
                files={"file": ("answer.webm", audio_data, "application/octet-stream")},
                data={"language": language},
            )
            response.raise_for_status()
            return response.json().get("text", "").strip()

        except httpx.HTTPError as e:
            logger.error(f"Whisper API error: {e}")
            raise TranscriptionError(f"Whisper API error: {e}") from e
