from __future__ import annotations

from typing import List, Tuple

from .analysis.types import AnalysisResult, Language


def render_sources(result: AnalysisResult) -> List[Tuple[str, str]]:
    """Return ``(label, uri)`` for every citation that has a usable link."""

    return [(source.label, source.uri) for source in result.sources if source.is_renderable]


def format_result(result: AnalysisResult, language: Language = "en") -> str:
    lines = [result.text_for(language)]
    links = render_sources(result)
    if links:
        lines.append("")
        lines.append("Sources:")
        lines.extend(f"  - {label}: {uri}" for label, uri in links)
    return "\n".join(lines)
