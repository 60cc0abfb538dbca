"""Text-to-speech via the Gemini audio modality."""

from __future__ import annotations

import base64
import logging
from typing import Any, Callable, Optional

from .errors import SynthesisError
from .genai_client import GeminiClient

logger = logging.getLogger(__name__)


def build_speech_prompt(text: str) -> str:
    return f"Say this naturally: {text}"


def _first_audio_blob(response: Any) -> Any:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return None
    inline = getattr(parts[0], "inline_data", None)
    return getattr(inline, "data", None)


class SpeechSynthesisClient:
    """Single-attempt speech synthesis returning base64 PCM."""

    def __init__(
        self,
        *,
        client: Optional[GeminiClient] = None,
        client_factory: Optional[Callable[[], GeminiClient]] = None,
    ) -> None:
        self._client = client
        self._client_factory = client_factory

    def _ensure_client(self) -> GeminiClient:
        if self._client is None:
            self._client = self._client_factory() if self._client_factory else GeminiClient()
        return self._client

    async def synthesize(self, text: str) -> str:
        if not text or not text.strip():
            raise SynthesisError("no text to synthesize")

        client = self._ensure_client()
        try:
            response = await client.generate_speech(text=build_speech_prompt(text))
        except Exception as exc:
            logger.exception("speech.request.failed")
            raise SynthesisError(f"speech request failed: {exc!r}") from exc

        data = _first_audio_blob(response)
        if not data:
            logger.warning("speech.response.empty")
            raise SynthesisError("No audio data received from API.")

        if isinstance(data, (bytes, bytearray)):
            encoded = base64.b64encode(bytes(data)).decode("ascii")
        else:
            encoded = str(data)
        logger.info("speech.request.complete", extra={"encoded_chars": len(encoded)})
        return encoded


__all__ = ["SpeechSynthesisClient"]
