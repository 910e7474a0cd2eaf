"""Models for saved translations"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import PersistenceValidationError
from ..translators.models import Section

MAX_TITLE_CHARS = 200
MAX_LYRICS_CHARS = 3000
MAX_SECTIONS = 50


class TranslationDraft(BaseModel):
    """Fields supplied by the user when saving a translation"""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    lyrics_text: str = Field(alias="lyrics")
    sections: list[Section] = Field(default_factory=list)


class TranslationPatch(BaseModel):
    """Partial update; fields left as None are kept"""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    lyrics_text: Optional[str] = Field(default=None, alias="lyrics")
    sections: Optional[list[Section]] = None


class SavedTranslation(BaseModel):
    """A translation persisted for one user"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    owner_id: str = Field(alias="userId")
    title: str
    lyrics_text: str = Field(alias="lyrics")
    sections: list[Section] = Field(default_factory=list)
    saved_at_millis: int = Field(alias="timestamp", description="Epoch milliseconds")


def validate_title(title: str) -> str:
    """Return the stripped title, or raise ``invalid-title``"""
    title = (title or "").strip()
    if not title:
        raise PersistenceValidationError("invalid-title", "Title must not be empty")
    if len(title) > MAX_TITLE_CHARS:
        raise PersistenceValidationError(
            "invalid-title",
            f"Title is {len(title)} characters (max {MAX_TITLE_CHARS})",
        )
    return title


def validate_lyrics(lyrics: str) -> str:
    if not lyrics or not lyrics.strip():
        raise PersistenceValidationError("invalid-lyrics", "Lyrics must not be empty")
    if len(lyrics) > MAX_LYRICS_CHARS:
        raise PersistenceValidationError(
            "invalid-lyrics",
            f"Lyrics are {len(lyrics)} characters (max {MAX_LYRICS_CHARS})",
        )
    return lyrics


def validate_sections(sections: list[Section]) -> list[Section]:
    if len(sections) > MAX_SECTIONS:
        raise PersistenceValidationError(
            "invalid-sections",
            f"{len(sections)} sections (max {MAX_SECTIONS})",
        )
    return sections
