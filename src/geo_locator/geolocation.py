"""Best-effort tracker for the device's latest known position."""

from __future__ import annotations

import logging
from typing import AsyncIterable, Optional, Tuple, Union

from .media.types import Coordinates

logger = logging.getLogger(__name__)

PositionUpdate = Union[Coordinates, Tuple[float, float]]


class CoordinatesTracker:
    def __init__(self, initial: Optional[Coordinates] = None) -> None:
        self._current = initial
        self.error: Optional[str] = None

    @property
    def current(self) -> Optional[Coordinates]:
        return self._current

    def update(self, latitude: float, longitude: float) -> None:
        self._current = Coordinates(latitude=float(latitude), longitude=float(longitude))
        self.error = None

    def fail(self, message: str) -> None:
        # A failed fix keeps the last known position.
        self.error = message
        logger.warning("geolocation.error", extra={"error": message})

    async def watch(self, updates: AsyncIterable[PositionUpdate]) -> None:
        """Consume a position stream until it ends; stream errors are recorded."""

        try:
            async for item in updates:
                if isinstance(item, Coordinates):
                    self.update(item.latitude, item.longitude)
                else:
                    latitude, longitude = item
                    self.update(latitude, longitude)
        except Exception as exc:
            self.fail(str(exc) or exc.__class__.__name__)
