"""Gemini SDK wrapper used by the inference and speech clients."""

from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from .media.types import Coordinates, MediaPayload
from .settings import GeminiSettings, require_api_key, settings

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin async wrapper around ``google.genai.Client``."""

    def __init__(
        self,
        gemini_cfg: Optional[GeminiSettings] = None,
        *,
        client: Optional[genai.Client] = None,
    ) -> None:
        self._cfg = gemini_cfg or settings.gemini
        if client is None:
            self._client = genai.Client(api_key=require_api_key(self._cfg))
        else:
            self._client = client

    @property
    def settings(self) -> GeminiSettings:
        return self._cfg

    async def generate_grounded(
        self,
        *,
        model: str,
        media: MediaPayload,
        prompt: str,
        coordinates: Optional[Coordinates] = None,
    ) -> Any:
        """Run a multimodal request with Google Search and Google Maps grounding."""

        parts = [
            types.Part.from_bytes(data=base64.b64decode(media.encoded_bytes), mime_type=media.mime_type),
            types.Part.from_text(text=prompt),
        ]
        config = types.GenerateContentConfig(
            tools=[
                types.Tool(google_search=types.GoogleSearch()),
                types.Tool(google_maps=types.GoogleMaps()),
            ],
        )
        if coordinates is not None:
            config.tool_config = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(
                        latitude=coordinates.latitude,
                        longitude=coordinates.longitude,
                    )
                )
            )
        logger.info(
            "genai.grounded.start",
            extra={"model": model, "mime_type": media.mime_type, "has_coordinates": coordinates is not None},
        )
        return await self._client.aio.models.generate_content(
            model=model,
            contents=types.Content(role="user", parts=parts),
            config=config,
        )

    async def generate_speech(self, *, text: str, model: Optional[str] = None, voice: Optional[str] = None) -> Any:
        """Request audio-only output spoken by a prebuilt voice."""

        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice or self._cfg.tts_voice),
                )
            ),
        )
        model_name = model or self._cfg.tts_model
        logger.info("genai.speech.start", extra={"model": model_name, "chars": len(text)})
        return await self._client.aio.models.generate_content(
            model=model_name,
            contents=[types.Content(role="user", parts=[types.Part.from_text(text=text)])],
            config=config,
        )


__all__ = ["GeminiClient"]
