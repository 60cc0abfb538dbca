from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Tuple

Language = Literal["en", "ru"]
SourceKind = Literal["web", "maps"]

LANGUAGES: Tuple[Language, ...] = ("en", "ru")


@dataclass(frozen=True, slots=True)
class SourceRef:
    """Grounding citation returned alongside a model answer."""

    kind: SourceKind
    uri: Optional[str] = None
    title: Optional[str] = None

    @property
    def is_renderable(self) -> bool:
        return bool(self.uri and self.uri.strip())

    @property
    def label(self) -> str:
        return self.title or "Source Link"

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        inner: Dict[str, str] = {}
        if self.uri is not None:
            inner["uri"] = self.uri
        if self.title is not None:
            inner["title"] = self.title
        return {self.kind: inner}

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["SourceRef"]:
        if not isinstance(raw, Mapping):
            return None
        for kind in ("web", "maps"):
            info = raw.get(kind)
            if isinstance(info, Mapping):
                uri = info.get("uri")
                title = info.get("title")
                return cls(
                    kind=kind,  # type: ignore[arg-type]
                    uri=uri if isinstance(uri, str) else None,
                    title=title if isinstance(title, str) else None,
                )
        return None


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    en: str
    ru: str
    sources: Tuple[SourceRef, ...] = field(default_factory=tuple)

    def text_for(self, language: Language) -> str:
        return self.ru if language == "ru" else self.en

    def to_dict(self) -> Dict[str, Any]:
        return {
            "en": self.en,
            "ru": self.ru,
            "sources": [source.to_dict() for source in self.sources],
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "AnalysisResult":
        """Rebuild a result from relay JSON; raises ValueError if text is missing."""

        en = raw.get("en")
        ru = raw.get("ru")
        if not isinstance(en, str) or not en.strip() or not isinstance(ru, str) or not ru.strip():
            raise ValueError("analysis result requires non-empty 'en' and 'ru'")
        raw_sources = raw.get("sources")
        sources = []
        if isinstance(raw_sources, list):
            for item in raw_sources:
                source = SourceRef.from_dict(item)
                if source is not None:
                    sources.append(source)
        return cls(en=en, ru=ru, sources=tuple(sources))
