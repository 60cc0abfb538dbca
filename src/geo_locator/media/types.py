from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class MediaPayload:
    """Encoded image or video ready to be sent to the model."""

    encoded_bytes: str
    mime_type: str

    @property
    def is_video(self) -> bool:
        return self.mime_type.lower().startswith("video/")


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> Optional["Coordinates"]:
        """Parse ``{latitude, longitude}``; anything malformed yields ``None``."""

        if not isinstance(raw, Mapping):
            return None
        lat = raw.get("latitude")
        lon = raw.get("longitude")
        if isinstance(lat, bool) or isinstance(lon, bool):
            return None
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            return None
        return cls(latitude=float(lat), longitude=float(lon))
