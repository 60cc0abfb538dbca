"""
pytest configuration: shared fixtures and fakes for the Gemini SDK surface.
"""

import struct
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest

from geo_locator.settings import GeminiSettings, SessionSettings


class FakeGeminiClient:
    """Stands in for GeminiClient; records calls and replays canned responses."""

    def __init__(
        self,
        *,
        grounded_response: Any = None,
        speech_response: Any = None,
        grounded_error: Optional[Exception] = None,
        speech_error: Optional[Exception] = None,
        settings: Optional[GeminiSettings] = None,
    ) -> None:
        self.settings = settings or GeminiSettings(
            api_key="test-key",
            image_model="image-model",
            video_model="video-model",
            tts_model="tts-model",
            tts_voice="Kore",
        )
        self._grounded_response = grounded_response
        self._speech_response = speech_response
        self._grounded_error = grounded_error
        self._speech_error = speech_error
        self.grounded_calls: List[dict] = []
        self.speech_calls: List[dict] = []

    async def generate_grounded(self, **kwargs):
        self.grounded_calls.append(kwargs)
        if self._grounded_error is not None:
            raise self._grounded_error
        return self._grounded_response

    async def generate_speech(self, **kwargs):
        self.speech_calls.append(kwargs)
        if self._speech_error is not None:
            raise self._speech_error
        return self._speech_response


def grounded_response(text: Optional[str], chunks: Optional[list] = None) -> SimpleNamespace:
    metadata = SimpleNamespace(grounding_chunks=chunks) if chunks is not None else None
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata)])


def web_chunk(uri: Optional[str], title: Optional[str] = None) -> SimpleNamespace:
    return SimpleNamespace(web=SimpleNamespace(uri=uri, title=title), maps=None)


def maps_chunk(uri: Optional[str], title: Optional[str] = None) -> SimpleNamespace:
    return SimpleNamespace(web=None, maps=SimpleNamespace(uri=uri, title=title))


def speech_response(data: Optional[bytes]) -> SimpleNamespace:
    inline = SimpleNamespace(data=data, mime_type="audio/L16;codec=pcm;rate=24000") if data is not None else None
    part = SimpleNamespace(inline_data=inline)
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def pcm16(*samples: int) -> bytes:
    return struct.pack(f"<{len(samples)}h", *samples)


@pytest.fixture
def fakes():
    """Namespace of fake builders so tests don't import conftest directly."""
    return SimpleNamespace(
        GeminiClient=FakeGeminiClient,
        grounded_response=grounded_response,
        web_chunk=web_chunk,
        maps_chunk=maps_chunk,
        speech_response=speech_response,
        pcm16=pcm16,
    )


@pytest.fixture
def fast_session_settings() -> SessionSettings:
    return SessionSettings(default_language="en", analysis_tick_seconds=0.001, audio_tick_seconds=0.001)


@pytest.fixture
def fake_sounddevice(monkeypatch):
    """Replace sounddevice inside the player with an in-memory double."""

    class CallbackStop(Exception):
        pass

    class FakeOutputStream:
        instances: List["FakeOutputStream"] = []

        def __init__(self, **kwargs):
            self.kwargs = kwargs
            self.started = False
            self.closed = False
            FakeOutputStream.instances.append(self)

        def start(self):
            self.started = True

        def stop(self):
            self.started = False

        def close(self):
            self.closed = True

    module = SimpleNamespace(OutputStream=FakeOutputStream, CallbackStop=CallbackStop)
    monkeypatch.setattr("geo_locator.audio.player.sd", module)
    return module


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests")
    config.addinivalue_line("markers", "integration: end-to-end tests across relay and session")
