import httpx
import pytest

from prepcoach.config import get_settings
from prepcoach.core.audio_processor import AudioProcessor, TranscriptionError


def _processor(handler) -> AudioProcessor:
    return AudioProcessor(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


async def test_unconfigured_backend_raises():
    processor = _processor(lambda request: httpx.Response(200))
    assert processor.is_configured is False
    with pytest.raises(TranscriptionError):
        await processor.transcribe_recording("http://files.test/a.webm")


async def test_downloads_then_transcribes_via_api(monkeypatch):
    monkeypatch.setenv("WHISPER_API_URL", "http://stt.test/transcribe")
    get_settings.cache_clear()
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append((request.method, str(request.url)))
        if request.method == "GET":
            return httpx.Response(200, content=b"\x00\x01audio")
        return httpx.Response(200, json={"text": "  I would use a queue.  "})

    processor = _processor(handler)
    transcript = await processor.transcribe_recording("http://files.test/a.webm")

    assert transcript == "I would use a queue."
    assert requests == [
        ("GET", "http://files.test/a.webm"),
        ("POST", "http://stt.test/transcribe"),
    ]
    await processor.close()


async def test_download_failure_is_transcription_error(monkeypatch):
    monkeypatch.setenv("WHISPER_API_URL", "http://stt.test/transcribe")
    get_settings.cache_clear()

    processor = _processor(lambda request: httpx.Response(404))
    with pytest.raises(TranscriptionError):
        await processor.transcribe_recording("http://files.test/missing.webm")
