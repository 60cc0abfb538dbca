from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True, slots=True)
class PcmFrameFormat:
    """Framing of a raw, headerless PCM stream."""

    sample_rate: int
    channels: int
    sample_width: int
    byte_order: str = "little"

    @property
    def frame_width(self) -> int:
        return self.sample_width * self.channels

    @property
    def dtype(self) -> np.dtype:
        prefix = "<" if self.byte_order == "little" else ">"
        return np.dtype(f"{prefix}i{self.sample_width}")

    @property
    def full_scale(self) -> float:
        return float(2 ** (8 * self.sample_width - 1))


# Fixed by the speech backend: mono, 16-bit signed little-endian, 24 kHz.
GEMINI_TTS_FORMAT = PcmFrameFormat(sample_rate=24000, channels=1, sample_width=2)


@dataclass(frozen=True, slots=True)
class DecodedAudioBuffer:
    """Normalized float32 samples shaped ``(frames, channels)``."""

    samples: np.ndarray
    frame_format: PcmFrameFormat
    session_id: Optional[str] = None

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / float(self.frame_format.sample_rate)
