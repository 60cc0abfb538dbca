"""Runtime configuration helpers for geo-locator."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigurationError


def _env_str(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class GeminiSettings:
    api_key: str | None
    image_model: str
    video_model: str
    tts_model: str
    tts_voice: str


@dataclass(frozen=True)
class RelaySettings:
    host: str
    port: int
    base_url: str | None
    path: str
    timeout: float


@dataclass(frozen=True)
class SessionSettings:
    default_language: str
    analysis_tick_seconds: float
    audio_tick_seconds: float


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    format: str
    file: str | None


@dataclass(frozen=True)
class Settings:
    gemini: GeminiSettings
    relay: RelaySettings
    session: SessionSettings
    logging: LoggingSettings


def load_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""

    gemini_settings = GeminiSettings(
        api_key=_env_str("GEMINI_API_KEY") or _env_str("API_KEY"),
        image_model=_env_str("GEO_IMAGE_MODEL", "gemini-2.5-flash"),
        video_model=_env_str("GEO_VIDEO_MODEL", "gemini-2.5-pro"),
        tts_model=_env_str("GEO_TTS_MODEL", "gemini-2.5-flash-preview-tts"),
        tts_voice=_env_str("GEO_TTS_VOICE", "Kore"),
    )

    relay_settings = RelaySettings(
        host=_env_str("GEO_RELAY_HOST", "0.0.0.0"),
        port=_env_int("GEO_RELAY_PORT", 8100),
        base_url=_env_str("GEO_RELAY_URL"),
        path=_env_str("GEO_RELAY_PATH", "/api/gemini"),
        timeout=_env_float("GEO_RELAY_TIMEOUT", 120.0),
    )

    language = (_env_str("GEO_TTS_LANGUAGE", "en") or "en").lower()
    session_settings = SessionSettings(
        default_language=language if language in {"en", "ru"} else "en",
        analysis_tick_seconds=_env_float("GEO_ANALYSIS_TICK_SECONDS", 0.5),
        audio_tick_seconds=_env_float("GEO_AUDIO_TICK_SECONDS", 0.4),
    )

    logging_settings = LoggingSettings(
        level=(_env_str("LOG_LEVEL", "INFO") or "INFO").upper(),
        format=_env_str("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        file=_env_str("LOG_FILE"),
    )

    return Settings(
        gemini=gemini_settings,
        relay=relay_settings,
        session=session_settings,
        logging=logging_settings,
    )


def require_api_key(cfg: GeminiSettings) -> str:
    """Return the model credential or fail the process start."""

    if not cfg.api_key:
        raise ConfigurationError("GEMINI_API_KEY environment variable is not set")
    return cfg.api_key


settings = load_settings()

__all__ = [
    "Settings",
    "GeminiSettings",
    "RelaySettings",
    "SessionSettings",
    "LoggingSettings",
    "settings",
    "load_settings",
    "require_api_key",
]
