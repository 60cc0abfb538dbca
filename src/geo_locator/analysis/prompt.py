from __future__ import annotations

from ..settings import GeminiSettings


def select_model(mime_type: str, cfg: GeminiSettings) -> str:
    """Video goes to the heavier model, stills to the lighter one."""

    return cfg.video_model if mime_type.lower().startswith("video/") else cfg.image_model


def build_location_prompt(*, is_video: bool) -> str:
    media_kind = "video" if is_video else "image"
    return f"""
Analyze this {media_kind} to identify the geographical location.
- Identify the specific landmark, city, and country.
- Using your tools, provide a summary of what this place is famous for, including user reviews if available.
- Your final response must be ONLY a JSON object with keys "en" and "ru".
- The "en" value should be a detailed description of the location in English. Include the landmark name, city, and country. Provide information about reviews and what the place is known for.
- The "ru" value should be a detailed description of the location in Russian. Include the landmark name, city, and country. Provide information about reviews and what the place is known for.
- Do not include any other text, markdown formatting, or bracketed citations like [1] or [2] outside of the JSON object.
""".strip()
