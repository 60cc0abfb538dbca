from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


# -----------------------------
# Relay wire models
# -----------------------------
class RelayEnvelope(BaseModel):
    action: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("action", mode="before")
    @classmethod
    def action_must_be_text(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("payload", mode="before")
    @classmethod
    def payload_must_be_object(cls, v: Any) -> Dict[str, Any]:
        return v if isinstance(v, dict) else {}


class AnalyzeRequest(BaseModel):
    base64Data: str = Field(min_length=1)
    mimeType: str = Field(min_length=1)
    # Validated separately: malformed coordinates are dropped, not rejected.
    coordinates: Any = None


class AudioRequest(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text is required")
        return v
