"""Error taxonomy shared by the relay and the client session.

Every error carries a short, stable ``user_message``. The exception's own
text (``str(exc)``) is diagnostic detail for logs and is never shown to users.
"""

from __future__ import annotations


class LocatorError(RuntimeError):
    """Base class for all geo-locator failures."""

    user_message = "An unknown error occurred."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class ConfigurationError(LocatorError):
    """Raised at process start when the model credential is missing."""

    user_message = "Server is not configured."


class TransportError(LocatorError):
    """Raised when the relay or model backend cannot be reached."""

    user_message = "Failed to communicate with the server."


class AnalysisError(LocatorError):
    """Raised when the model reply cannot be turned into a location result."""

    user_message = "Failed to analyze the media. The model could not identify the location."


class SynthesisError(LocatorError):
    """Raised when the text-to-speech step fails."""

    user_message = "Failed to generate audio summary."


class DecodeError(LocatorError):
    """Raised when an audio payload is not valid PCM for its frame format."""

    user_message = "Could not decode the audio summary."


class MediaReadError(LocatorError):
    user_message = "Could not read the selected file."


class UnsupportedMediaError(LocatorError):
    user_message = "Please choose an image or video file."


class PlaybackError(LocatorError):
    user_message = "Audio playback is not available."


__all__ = [
    "LocatorError",
    "ConfigurationError",
    "TransportError",
    "AnalysisError",
    "SynthesisError",
    "DecodeError",
    "MediaReadError",
    "UnsupportedMediaError",
    "PlaybackError",
]
