from __future__ import annotations

import abc
from typing import Optional

from ..analysis.types import AnalysisResult
from ..media.types import Coordinates, MediaPayload


class LocatorBackend(abc.ABC):
    """Abstract analysis + speech backend used by the client session."""

    name: str

    @abc.abstractmethod
    async def analyze(self, media: MediaPayload, coordinates: Optional[Coordinates]) -> AnalysisResult:
        """Return a bilingual location description or raise a LocatorError."""

    @abc.abstractmethod
    async def synthesize(self, text: str) -> str:
        """Return base64 PCM speech for ``text`` or raise a LocatorError."""

    async def close(self) -> None:
        """Allow backend to cleanup resources if needed."""
        return None
