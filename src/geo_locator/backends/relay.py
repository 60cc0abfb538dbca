"""HTTP client for the geo-locator relay service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..analysis.types import AnalysisResult
from ..errors import AnalysisError, SynthesisError, TransportError
from ..media.types import Coordinates, MediaPayload
from .base import LocatorBackend

logger = logging.getLogger(__name__)


class RelayBackend(LocatorBackend):
    name = "relay"

    def __init__(
        self,
        *,
        base_url: str,
        path: str = "/api/gemini",
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._path = path or "/api/gemini"
        self._timeout = httpx.Timeout(timeout, connect=5.0)
        self._transport = transport

    async def _post(self, action: str, payload: Dict[str, Any]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                return await client.post(self._path, json={"action": action, "payload": payload})
        except httpx.HTTPError as exc:
            logger.warning("relay.transport.error", extra={"action": action, "error": repr(exc)})
            raise TransportError(f"relay unreachable: {exc!r}") from exc

    async def analyze(self, media: MediaPayload, coordinates: Optional[Coordinates]) -> AnalysisResult:
        payload = {
            "base64Data": media.encoded_bytes,
            "mimeType": media.mime_type,
            "coordinates": coordinates.to_dict() if coordinates else None,
        }
        response = await self._post("analyze", payload)
        if response.is_error:
            logger.warning(
                "relay.analyze.status",
                extra={"status": response.status_code, "body": response.text[:500]},
            )
            raise AnalysisError(f"relay returned {response.status_code}")
        try:
            return AnalysisResult.from_dict(response.json())
        except (ValueError, AttributeError) as exc:
            logger.warning("relay.analyze.malformed", extra={"error": repr(exc)})
            raise AnalysisError("relay returned a malformed analysis") from exc

    async def synthesize(self, text: str) -> str:
        response = await self._post("audio", {"text": text})
        if response.is_error:
            logger.warning(
                "relay.audio.status",
                extra={"status": response.status_code, "body": response.text[:500]},
            )
            raise SynthesisError(f"relay returned {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise SynthesisError("relay returned invalid JSON") from exc
        audio = data.get("audio") if isinstance(data, dict) else None
        if not isinstance(audio, str) or not audio:
            raise SynthesisError("No audio data received from relay.")
        return audio


__all__ = ["RelayBackend"]
