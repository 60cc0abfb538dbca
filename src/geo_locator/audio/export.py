from __future__ import annotations

from pathlib import Path
from typing import Union

try:  # pragma: no cover - optional dependency guard
    import soundfile as sf
except Exception:  # pragma: no cover
    sf = None  # type: ignore[assignment]

from ..errors import PlaybackError
from .types import DecodedAudioBuffer


def write_wav(buffer: DecodedAudioBuffer, path: Union[str, Path]) -> Path:
    """Write a decoded buffer to disk as 16-bit PCM WAV."""

    if sf is None:
        raise PlaybackError("soundfile is not available")
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    sf.write(str(target), buffer.samples, buffer.frame_format.sample_rate, subtype="PCM_16", format="WAV")
    return target
