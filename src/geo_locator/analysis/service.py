from __future__ import annotations

import logging
from typing import Callable, Optional

from ..errors import AnalysisError
from ..genai_client import GeminiClient
from ..media.types import Coordinates, MediaPayload
from .parsing import extract_sources, parse_bilingual_reply
from .prompt import build_location_prompt, select_model
from .types import AnalysisResult

logger = logging.getLogger(__name__)


class LocationInferenceClient:
    """Asks a grounded multimodal model where a photo or video was taken."""

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

    async def analyze(self, media: MediaPayload, coordinates: Optional[Coordinates] = None) -> AnalysisResult:
        client = self._ensure_client()
        model = select_model(media.mime_type, client.settings)
        prompt = build_location_prompt(is_video=media.is_video)

        try:
            response = await client.generate_grounded(
                model=model,
                media=media,
                prompt=prompt,
                coordinates=coordinates,
            )
        except Exception as exc:
            logger.exception("analysis.request.failed", extra={"model": model, "mime_type": media.mime_type})
            raise AnalysisError(f"model request failed: {exc!r}") from exc

        reply = getattr(response, "text", None) or ""
        try:
            texts = parse_bilingual_reply(reply)
        except ValueError as exc:
            logger.warning(
                "analysis.reply.unparseable",
                extra={"model": model, "error": repr(exc), "reply_preview": reply[:200]},
            )
            raise AnalysisError(f"unparseable model reply: {exc}") from exc

        sources = extract_sources(response)
        logger.info(
            "analysis.request.complete",
            extra={"model": model, "sources": len(sources), "has_coordinates": coordinates is not None},
        )
        return AnalysisResult(en=texts["en"], ru=texts["ru"], sources=tuple(sources))


__all__ = ["LocationInferenceClient"]
