"""Location inference: prompt, model call and reply parsing."""

from .service import LocationInferenceClient
from .types import LANGUAGES, AnalysisResult, Language, SourceRef

__all__ = ["LocationInferenceClient", "AnalysisResult", "SourceRef", "Language", "LANGUAGES"]
