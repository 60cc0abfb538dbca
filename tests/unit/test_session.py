import asyncio
import base64

import pytest

from geo_locator.analysis.types import AnalysisResult
from geo_locator.backends.base import LocatorBackend
from geo_locator.errors import AnalysisError, SynthesisError, TransportError
from geo_locator.session import LocatorSession, ProgressTicker

JPEG = b"\xff\xd8jpeg"


def _audio(fakes, *samples: int) -> str:
    return base64.b64encode(fakes.pcm16(*samples)).decode("ascii")


class ScriptedBackend(LocatorBackend):
    """Answers analyze/synthesize from per-call scripts; synthesis may wait on a gate."""

    name = "scripted"

    def __init__(self, results, audio=None, gates=None, analysis_error=None, synthesis_error=None):
        self.results = list(results)
        self.audio = audio or {}
        self.gates = gates or {}
        self.analysis_error = analysis_error
        self.synthesis_error = synthesis_error
        self.analyze_calls = []
        self.synthesize_calls = []
        self.closed = False

    async def analyze(self, media, coordinates):
        self.analyze_calls.append((media, coordinates))
        if self.analysis_error is not None:
            raise self.analysis_error
        return self.results.pop(0)

    async def synthesize(self, text):
        self.synthesize_calls.append(text)
        gate = self.gates.get(text)
        if gate is not None:
            await gate.wait()
        if self.synthesis_error is not None:
            raise self.synthesis_error
        return self.audio[text]

    async def close(self):
        self.closed = True


def _result(en: str, ru: str = "Текст") -> AnalysisResult:
    return AnalysisResult(en=en, ru=ru, sources=())


@pytest.mark.asyncio
async def test_analyze_runs_full_pipeline(fakes, fast_session_settings):
    backend = ScriptedBackend([_result("Rome")], audio={"Rome": _audio(fakes, 1, 2, 3)})
    session = LocatorSession(backend, session_cfg=fast_session_settings)
    session.tracker.update(41.9, 12.5)

    result = await session.analyze(JPEG, mime_type="image/jpeg")

    assert result.en == "Rome"
    assert session.result is result
    assert session.error is None
    assert not session.is_loading
    assert not session.is_generating_audio
    assert session.analysis_progress == 100
    assert session.audio_progress == 100
    assert session.audio_buffer.frame_count == 3
    assert session.audio_buffer.session_id == session.session_id
    assert session.player.buffer is session.audio_buffer
    assert backend.analyze_calls[0][1].latitude == 41.9


@pytest.mark.asyncio
async def test_tts_language_selects_russian_text(fakes, fast_session_settings):
    backend = ScriptedBackend([_result("Rome", "Рим")], audio={"Рим": _audio(fakes, 0)})
    session = LocatorSession(backend, session_cfg=fast_session_settings, tts_language="ru")

    await session.analyze(JPEG, mime_type="image/jpeg")

    assert backend.synthesize_calls == ["Рим"]


@pytest.mark.asyncio
async def test_analysis_failure_skips_synthesis(fast_session_settings):
    backend = ScriptedBackend([], analysis_error=AnalysisError("no json"))
    session = LocatorSession(backend, session_cfg=fast_session_settings)

    result = await session.analyze(JPEG, mime_type="image/jpeg")

    assert result is None
    assert session.error == AnalysisError.user_message
    assert session.result is None
    assert session.audio_buffer is None
    assert not session.is_loading
    assert backend.synthesize_calls == []


@pytest.mark.asyncio
async def test_transport_failure_uses_transport_message(fast_session_settings):
    backend = ScriptedBackend([], analysis_error=TransportError("refused"))
    session = LocatorSession(backend, session_cfg=fast_session_settings)

    await session.analyze(JPEG, mime_type="image/jpeg")

    assert session.error == "Failed to communicate with the server."


@pytest.mark.asyncio
async def test_unsupported_media_never_reaches_backend(fast_session_settings):
    backend = ScriptedBackend([_result("x")])
    session = LocatorSession(backend, session_cfg=fast_session_settings)

    await session.analyze(b"text", mime_type="text/plain")

    assert session.error == "Please choose an image or video file."
    assert backend.analyze_calls == []


@pytest.mark.asyncio
async def test_synthesis_failure_keeps_result(fast_session_settings):
    backend = ScriptedBackend([_result("Rome")], synthesis_error=SynthesisError("no audio"))
    session = LocatorSession(backend, session_cfg=fast_session_settings)

    result = await session.analyze(JPEG, mime_type="image/jpeg")

    assert result is not None
    assert session.result is result
    assert session.error is None
    assert session.audio_error == SynthesisError.user_message
    assert session.audio_buffer is None
    assert not session.is_generating_audio


@pytest.mark.asyncio
async def test_undecodable_audio_is_contained(fast_session_settings):
    backend = ScriptedBackend([_result("Rome")], audio={"Rome": base64.b64encode(b"\x01\x02\x03").decode()})
    session = LocatorSession(backend, session_cfg=fast_session_settings)

    await session.analyze(JPEG, mime_type="image/jpeg")

    assert session.result is not None
    assert session.audio_error == "Could not decode the audio summary."
    assert session.player.buffer is None


@pytest.mark.asyncio
async def test_stale_synthesis_is_discarded(fakes, fast_session_settings):
    gate = asyncio.Event()
    backend = ScriptedBackend(
        [_result("First"), _result("Second")],
        audio={"First": _audio(fakes, 1, 1, 1, 1), "Second": _audio(fakes, 2)},
        gates={"First": gate},
    )
    session = LocatorSession(backend, session_cfg=fast_session_settings)

    first = asyncio.create_task(session.analyze(JPEG, mime_type="image/jpeg"))
    while backend.synthesize_calls != ["First"]:
        await asyncio.sleep(0)

    second = await session.analyze(JPEG, mime_type="image/jpeg")
    gate.set()
    assert await first is None

    assert session.result is second
    assert session.result.en == "Second"
    assert session.audio_buffer.frame_count == 1
    assert session.player.buffer.session_id == session.session_id


@pytest.mark.asyncio
async def test_reset_clears_state(fakes, fast_session_settings):
    backend = ScriptedBackend([_result("Rome")], audio={"Rome": _audio(fakes, 1)})
    session = LocatorSession(backend, session_cfg=fast_session_settings)
    await session.analyze(JPEG, mime_type="image/jpeg")

    session.reset()

    assert session.result is None
    assert session.audio_buffer is None
    assert session.session_id is None
    assert session.player.buffer is None
    assert session.analysis_progress == 0


@pytest.mark.asyncio
async def test_close_closes_backend(fast_session_settings):
    backend = ScriptedBackend([])
    session = LocatorSession(backend, session_cfg=fast_session_settings)

    await session.close()

    assert backend.closed


@pytest.mark.asyncio
async def test_progress_ticker_caps_and_finishes():
    ticker = ProgressTicker(step=5, interval=0.001, cap=90)
    ticker.start()

    for _ in range(200):
        if ticker.value == 90:
            break
        await asyncio.sleep(0.001)

    assert ticker.value == 90
    ticker.stop(final=100)
    assert ticker.value == 100
