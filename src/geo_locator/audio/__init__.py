"""Speech audio decoding and playback."""

from .decoder import decode, decode_pcm
from .export import write_wav
from .player import AudioOutputContext, AudioPlayer
from .types import GEMINI_TTS_FORMAT, DecodedAudioBuffer, PcmFrameFormat

__all__ = [
    "decode",
    "decode_pcm",
    "write_wav",
    "AudioOutputContext",
    "AudioPlayer",
    "DecodedAudioBuffer",
    "PcmFrameFormat",
    "GEMINI_TTS_FORMAT",
]
