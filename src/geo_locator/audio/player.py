from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

import numpy as np

try:  # pragma: no cover - optional dependency guard
    import sounddevice as sd
except Exception:  # pragma: no cover - PortAudio missing on headless hosts
    sd = None  # type: ignore[assignment]

from ..errors import PlaybackError
from .types import DecodedAudioBuffer

logger = logging.getLogger(__name__)


class AudioOutputContext:
    """One audio output device handle, scoped to a single analysis session."""

    def __init__(self) -> None:
        self.state = "suspended"
        self._stream = None

    def resume(self) -> None:
        if self.state == "closed":
            raise PlaybackError("audio context already closed")
        if sd is None:
            raise PlaybackError("sounddevice is not available")
        self.state = "running"

    def start(self, buffer: DecodedAudioBuffer, on_finished: Callable[[], None]) -> None:
        if self.state != "running":
            raise PlaybackError(f"audio context is {self.state}")
        self.stop()

        samples = buffer.samples
        position = 0

        def callback(outdata: np.ndarray, frames: int, time_info, status) -> None:  # noqa: ANN001
            nonlocal position
            chunk = samples[position : position + frames]
            outdata[: len(chunk)] = chunk
            if len(chunk) < frames:
                outdata[len(chunk) :] = 0
                raise sd.CallbackStop()
            position += frames

        try:
            stream = sd.OutputStream(
                samplerate=buffer.frame_format.sample_rate,
                channels=buffer.frame_format.channels,
                dtype="float32",
                callback=callback,
                finished_callback=on_finished,
            )
            stream.start()
        except Exception as exc:
            logger.exception("audio.output.start_failed")
            raise PlaybackError(f"cannot open output stream: {exc!r}") from exc
        self._stream = stream

    def stop(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
            stream.close()
        except Exception:  # pragma: no cover - best effort cleanup
            logger.debug("audio.output.close_failed", exc_info=True)

    def close(self) -> None:
        self.stop()
        self.state = "closed"


class AudioPlayer:
    """Plays decoded speech for the current session only."""

    def __init__(self, *, context_factory: Callable[[], AudioOutputContext] = AudioOutputContext) -> None:
        self._context_factory = context_factory
        self._context: Optional[AudioOutputContext] = None
        self._session_id: Optional[str] = None
        self._buffer: Optional[DecodedAudioBuffer] = None
        self._play_token = 0
        self.state = "idle"

    @property
    def buffer(self) -> Optional[DecodedAudioBuffer]:
        return self._buffer

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def is_playing(self) -> bool:
        return self.state == "playing"

    def reset(self, session_id: Optional[str] = None) -> None:
        """Tear down the output context and switch to ``session_id``."""

        self._play_token += 1
        if self._context is not None:
            self._context.close()
            self._context = None
        self._buffer = None
        self._session_id = session_id
        self.state = "idle"

    def load(self, buffer: DecodedAudioBuffer) -> bool:
        if buffer.session_id != self._session_id:
            logger.info(
                "audio.player.stale_buffer",
                extra={"buffer_session": buffer.session_id, "current_session": self._session_id},
            )
            return False
        self._buffer = buffer
        return True

    def play(self, buffer: Optional[DecodedAudioBuffer] = None) -> bool:
        """Start playback from the beginning; returns False when nothing started."""

        if buffer is not None and not self.load(buffer):
            return False
        if self._buffer is None or self.is_playing:
            return False

        context = self._ensure_context()
        context.resume()

        self._play_token += 1
        token = self._play_token
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        def on_finished() -> None:
            if loop is not None and not loop.is_closed():
                loop.call_soon_threadsafe(self._on_finished, token)
            else:
                self._on_finished(token)

        context.start(self._buffer, on_finished)
        self.state = "playing"
        logger.info("audio.player.start", extra={"frames": self._buffer.frame_count})
        return True

    def _on_finished(self, token: int) -> None:
        if token != self._play_token:
            return
        self.state = "idle"
        if self._context is not None:
            self._context.stop()
        logger.info("audio.player.finished")

    def _ensure_context(self) -> AudioOutputContext:
        if self._context is None:
            self._context = self._context_factory()
        return self._context


__all__ = ["AudioOutputContext", "AudioPlayer"]
