from __future__ import annotations

import base64
import binascii
from typing import Optional, Union

import numpy as np

from ..errors import DecodeError
from .types import GEMINI_TTS_FORMAT, DecodedAudioBuffer, PcmFrameFormat


def decode_pcm(
    raw: bytes,
    *,
    frame_format: PcmFrameFormat = GEMINI_TTS_FORMAT,
    session_id: Optional[str] = None,
) -> DecodedAudioBuffer:
    """Interpret ``raw`` strictly as ``frame_format`` PCM and normalize to [-1, 1)."""

    if len(raw) % frame_format.frame_width:
        raise DecodeError(
            f"payload of {len(raw)} bytes is not a multiple of the {frame_format.frame_width}-byte frame"
        )
    ints = np.frombuffer(raw, dtype=frame_format.dtype)
    samples = (ints.astype(np.float32) / np.float32(frame_format.full_scale)).reshape(-1, frame_format.channels)
    samples.setflags(write=False)
    return DecodedAudioBuffer(samples=samples, frame_format=frame_format, session_id=session_id)


def decode(
    payload: Union[str, bytes],
    *,
    frame_format: PcmFrameFormat = GEMINI_TTS_FORMAT,
    session_id: Optional[str] = None,
) -> DecodedAudioBuffer:
    """Decode a base64 audio payload as produced by the speech client."""

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError, TypeError) as exc:
        raise DecodeError("audio payload is not valid base64") from exc
    return decode_pcm(raw, frame_format=frame_format, session_id=session_id)


__all__ = ["decode", "decode_pcm"]
