from __future__ import annotations

from typing import Optional

from ..analysis.service import LocationInferenceClient
from ..analysis.types import AnalysisResult
from ..media.types import Coordinates, MediaPayload
from ..speech import SpeechSynthesisClient
from .base import LocatorBackend


class DirectBackend(LocatorBackend):
    """Calls the model in-process, holding the credential locally."""

    name = "direct"

    def __init__(
        self,
        *,
        inference: Optional[LocationInferenceClient] = None,
        synthesis: Optional[SpeechSynthesisClient] = None,
    ) -> None:
        self._inference = inference or LocationInferenceClient()
        self._synthesis = synthesis or SpeechSynthesisClient()

    async def analyze(self, media: MediaPayload, coordinates: Optional[Coordinates]) -> AnalysisResult:
        return await self._inference.analyze(media, coordinates)

    async def synthesize(self, text: str) -> str:
        return await self._synthesis.synthesize(text)
