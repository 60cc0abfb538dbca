"""Pure text transforms applied to model replies.

Models tend to wrap structured output in markdown fences and sprinkle
``[n]`` citation markers even when told not to. The helpers here undo that
and nothing else.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, List, Optional

from .types import SourceRef

FENCE_PATTERN = re.compile(r"```(?P<lang>[\w+-]+)?\s*(?P<body>[\s\S]*?)\s*```")
CITATION_PATTERN = re.compile(r"\[\d+\]")


def extract_json_text(reply: str) -> str:
    """Return the payload of the first fenced block, or the trimmed reply.

    Only one level of fencing is removed.
    """

    text = (reply or "").strip()
    match = FENCE_PATTERN.search(text)
    if match and match.group("body"):
        return match.group("body")
    return text


def strip_citations(text: str) -> str:
    """Drop ``[1]``-style markers and trim; inner whitespace is left untouched."""

    return CITATION_PATTERN.sub("", text or "").strip()


def parse_bilingual_reply(reply: str) -> dict[str, str]:
    """Parse a model reply into cleaned ``{"en", "ru"}`` text.

    Raises:
        ValueError: when the reply is not a JSON object or either language
            is missing or empty after cleaning.
    """

    parsed = json.loads(extract_json_text(reply))
    if not isinstance(parsed, dict):
        raise ValueError("model reply is not a JSON object")

    cleaned: dict[str, str] = {}
    for key in ("en", "ru"):
        value = parsed.get(key)
        if not isinstance(value, str):
            raise ValueError(f"model reply is missing '{key}'")
        text = strip_citations(value)
        if not text:
            raise ValueError(f"model reply has empty '{key}'")
        cleaned[key] = text
    return cleaned


def _chunk_to_source(chunk: Any) -> Optional[SourceRef]:
    for kind in ("web", "maps"):
        info = getattr(chunk, kind, None)
        if info is None and isinstance(chunk, dict):
            info = chunk.get(kind)
        if info is None:
            continue
        if isinstance(info, dict):
            uri, title = info.get("uri"), info.get("title")
        else:
            uri, title = getattr(info, "uri", None), getattr(info, "title", None)
        return SourceRef(kind=kind, uri=uri or None, title=title or None)  # type: ignore[arg-type]
    return None


def extract_sources(response: Any) -> List[SourceRef]:
    """Collect grounding citations from the first candidate, if any."""

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks: Iterable[Any] = getattr(metadata, "grounding_chunks", None) or []

    sources: List[SourceRef] = []
    for chunk in chunks:
        source = _chunk_to_source(chunk)
        if source is not None:
            sources.append(source)
    return sources


__all__ = [
    "FENCE_PATTERN",
    "CITATION_PATTERN",
    "extract_json_text",
    "strip_citations",
    "parse_bilingual_reply",
    "extract_sources",
]
