"""songlens - section-by-section lyrics translation and analysis"""

from .errors import SongLensError
from .storage import SavedTranslation, TranslationStore
from .translators import LyricsPipelineAgent, PipelineConfig, Section, SectionBoundary

__version__ = "0.1.0"

__all__ = [
    "LyricsPipelineAgent",
    "PipelineConfig",
    "Section",
    "SectionBoundary",
    "SavedTranslation",
    "TranslationStore",
    "SongLensError",
]
