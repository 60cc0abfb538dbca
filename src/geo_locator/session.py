"""Client-side orchestration: encode, analyze, synthesize, decode, play."""

from __future__ import annotations

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from .analysis.types import AnalysisResult, Language
from .audio.decoder import decode
from .audio.player import AudioPlayer
from .audio.types import DecodedAudioBuffer
from .backends.base import LocatorBackend
from .errors import LocatorError
from .geolocation import CoordinatesTracker
from .media.encoder import MediaEncoder
from .media.types import MediaPayload
from .settings import SessionSettings, settings as runtime_settings

logger = logging.getLogger(__name__)

MediaSource = Union[str, Path, bytes, Callable[[], Awaitable[bytes]]]


class ProgressTicker:
    """Simulated progress for calls whose duration is unknown up front."""

    def __init__(self, *, step: int, interval: float, cap: int) -> None:
        self._step = step
        self._interval = interval
        self._cap = cap
        self._task: Optional[asyncio.Task] = None
        self.value = 0

    def start(self) -> None:
        self.stop()
        self.value = 0
        self._task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        while self.value < self._cap:
            await asyncio.sleep(self._interval)
            self.value = min(self.value + self._step, self._cap)

    def stop(self, final: Optional[int] = None) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        if final is not None:
            self.value = final


class LocatorSession:
    """Tracks one user's analysis flow and the state shown to them."""

    def __init__(
        self,
        backend: LocatorBackend,
        *,
        encoder: Optional[MediaEncoder] = None,
        player: Optional[AudioPlayer] = None,
        tracker: Optional[CoordinatesTracker] = None,
        session_cfg: Optional[SessionSettings] = None,
        tts_language: Optional[Language] = None,
    ) -> None:
        self._backend = backend
        self._encoder = encoder or MediaEncoder()
        self._player = player or AudioPlayer()
        self._tracker = tracker or CoordinatesTracker()
        self._cfg = session_cfg or runtime_settings.session
        self.tts_language: Language = tts_language or self._cfg.default_language  # type: ignore[assignment]

        self._session_id: Optional[str] = None
        self._analysis_ticker: Optional[ProgressTicker] = None
        self._audio_ticker: Optional[ProgressTicker] = None
        self._clear_state()

    def _clear_state(self) -> None:
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[str] = None
        self.is_loading = False
        self.is_generating_audio = False
        self.audio_error: Optional[str] = None
        self.audio_buffer: Optional[DecodedAudioBuffer] = None

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def player(self) -> AudioPlayer:
        return self._player

    @property
    def tracker(self) -> CoordinatesTracker:
        return self._tracker

    @property
    def analysis_progress(self) -> int:
        return self._analysis_ticker.value if self._analysis_ticker else 0

    @property
    def audio_progress(self) -> int:
        return self._audio_ticker.value if self._audio_ticker else 0

    def reset(self) -> None:
        """Drop all state; pending calls from the old session will be ignored."""

        for ticker in (self._analysis_ticker, self._audio_ticker):
            if ticker is not None:
                ticker.stop()
        self._analysis_ticker = None
        self._audio_ticker = None
        self._session_id = None
        self._clear_state()
        self._player.reset(None)

    def _begin(self) -> str:
        self.reset()
        session_id = uuid.uuid4().hex
        self._session_id = session_id
        self._player.reset(session_id)
        return session_id

    def _is_current(self, session_id: str) -> bool:
        return self._session_id == session_id

    async def _encode(self, source: MediaSource, mime_type: Optional[str]) -> MediaPayload:
        if isinstance(source, (bytes, bytearray)):
            return await self._encoder.from_bytes(data=bytes(source), mime_type=mime_type)
        if callable(source):
            return await self._encoder.from_upload(file_reader=source, mime_type=mime_type)
        return await self._encoder.from_path(source, mime_type=mime_type)

    async def analyze(self, source: MediaSource, *, mime_type: Optional[str] = None) -> Optional[AnalysisResult]:
        """Run the whole pipeline; returns the result, or None on failure or if superseded."""

        session_id = self._begin()
        ticker = ProgressTicker(step=5, interval=self._cfg.analysis_tick_seconds, cap=90)
        self._analysis_ticker = ticker
        self.is_loading = True
        ticker.start()

        try:
            media = await self._encode(source, mime_type)
            if not self._is_current(session_id):
                return None
            result = await self._backend.analyze(media, self._tracker.current)
        except LocatorError as exc:
            ticker.stop()
            if not self._is_current(session_id):
                return None
            logger.warning("session.analysis.failed", extra={"session": session_id, "error": repr(exc)})
            self.error = exc.user_message
            self.is_loading = False
            return None

        if not self._is_current(session_id):
            ticker.stop()
            logger.info("session.analysis.stale", extra={"session": session_id})
            return None

        ticker.stop(final=100)
        self.result = result
        self.is_loading = False
        logger.info("session.analysis.done", extra={"session": session_id, "sources": len(result.sources)})

        await self._generate_audio(session_id, result)
        return result if self._is_current(session_id) else None

    async def _generate_audio(self, session_id: str, result: AnalysisResult) -> None:
        ticker = ProgressTicker(step=5, interval=self._cfg.audio_tick_seconds, cap=95)
        self._audio_ticker = ticker
        self.is_generating_audio = True
        ticker.start()
        try:
            payload = await self._backend.synthesize(result.text_for(self.tts_language))
            if not self._is_current(session_id):
                logger.info("session.audio.stale", extra={"session": session_id})
                return
            buffer = decode(payload, session_id=session_id)
        except LocatorError as exc:
            if self._is_current(session_id):
                logger.warning("session.audio.failed", extra={"session": session_id, "error": repr(exc)})
                self.audio_error = exc.user_message
        else:
            if self._player.load(buffer):
                self.audio_buffer = buffer
        finally:
            if self._is_current(session_id):
                ticker.stop(final=100)
                self.is_generating_audio = False
            else:
                ticker.stop()

    def play(self) -> bool:
        return self._player.play()

    async def wait_for_playback(self, poll_interval: float = 0.05) -> None:
        while self._player.is_playing:
            await asyncio.sleep(poll_interval)

    async def close(self) -> None:
        self.reset()
        try:
            await self._backend.close()
        except Exception:  # pragma: no cover - best effort cleanup
            logger.debug("session.backend.close_failed", exc_info=True)


__all__ = ["LocatorSession", "ProgressTicker", "MediaSource"]
