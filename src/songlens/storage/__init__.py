"""Per-user storage for saved translations"""

from .models import (
    MAX_LYRICS_CHARS,
    MAX_SECTIONS,
    MAX_TITLE_CHARS,
    SavedTranslation,
    TranslationDraft,
    TranslationPatch,
)
from .store import TranslationStore

__all__ = [
    "TranslationStore",
    "SavedTranslation",
    "TranslationDraft",
    "TranslationPatch",
    "MAX_TITLE_CHARS",
    "MAX_LYRICS_CHARS",
    "MAX_SECTIONS",
]
