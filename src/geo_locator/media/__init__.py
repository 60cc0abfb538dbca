"""Media encoding for analysis requests."""

from .encoder import MediaEncoder, is_supported_mime_type
from .types import Coordinates, MediaPayload

__all__ = ["MediaEncoder", "MediaPayload", "Coordinates", "is_supported_mime_type"]
