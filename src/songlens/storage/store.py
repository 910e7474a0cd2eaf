"""SQLite-backed async store for saved translations

Sections are kept as a JSON document column; timestamps as epoch
milliseconds. Native aiosqlite errors never leave this module.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator

import aiosqlite

from ..errors import NotFoundError, PersistenceError, UnauthorizedError
from ..translators.models import Section
from .models import (
    SavedTranslation,
    TranslationDraft,
    TranslationPatch,
    validate_lyrics,
    validate_sections,
    validate_title,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS translations (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    title TEXT NOT NULL,
    lyrics TEXT NOT NULL,
    sections TEXT NOT NULL,
    saved_at INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_translations_owner
    ON translations (owner_id, saved_at DESC);
"""


def now_millis() -> int:
    return int(time.time() * 1000)


def _dump_sections(sections: list[Section]) -> str:
    return json.dumps(
        [s.model_dump(by_alias=True) for s in sections], ensure_ascii=False
    )


def _row_to_record(row: aiosqlite.Row) -> SavedTranslation:
    return SavedTranslation(
        id=row["id"],
        owner_id=row["owner_id"],
        title=row["title"],
        lyrics_text=row["lyrics"],
        sections=[Section.model_validate(s) for s in json.loads(row["sections"])],
        saved_at_millis=row["saved_at"],
    )


class TranslationStore:
    """CRUD for SavedTranslation records, scoped by owner"""

    def __init__(self, db_path: str = "data/songlens.db"):
        self.db_path = db_path

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as e:
            logger.error(f"Storage error: {e}")
            raise PersistenceError("Storage operation failed", details=str(e)) from e

    async def init(self) -> None:
        """Create tables if they don't exist."""
        async with self._connect() as db:
            await db.executescript(SCHEMA)
            await db.commit()

    async def _fetch(self, db: aiosqlite.Connection, translation_id: str) -> SavedTranslation:
        async with db.execute(
            "SELECT * FROM translations WHERE id = ?", (translation_id,)
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            raise NotFoundError(f"Translation not found: {translation_id}")
        return _row_to_record(row)

    async def _fetch_owned(
        self, db: aiosqlite.Connection, translation_id: str, owner_id: str
    ) -> SavedTranslation:
        record = await self._fetch(db, translation_id)
        if record.owner_id != owner_id:
            logger.warning(
                f"User {owner_id} denied access to translation {translation_id}"
            )
            raise UnauthorizedError("You do not own this translation")
        return record

    async def create(self, owner_id: str, draft: TranslationDraft) -> str:
        """Validate and insert a new record, returning its id"""
        title = validate_title(draft.title)
        lyrics = validate_lyrics(draft.lyrics_text)
        sections = validate_sections(draft.sections)

        translation_id = uuid.uuid4().hex
        async with self._connect() as db:
            await db.execute(
                """INSERT INTO translations (id, owner_id, title, lyrics, sections, saved_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    translation_id,
                    owner_id,
                    title,
                    lyrics,
                    _dump_sections(sections),
                    now_millis(),
                ),
            )
            await db.commit()
        logger.info(f"Saved translation {translation_id} for {owner_id}")
        return translation_id

    async def get(self, translation_id: str, owner_id: str) -> SavedTranslation:
        """Fetch a single record owned by ``owner_id``."""
        async with self._connect() as db:
            return await self._fetch_owned(db, translation_id, owner_id)

    async def list(self, owner_id: str) -> list[SavedTranslation]:
        """List the owner's records, newest first."""
        async with self._connect() as db:
            async with db.execute(
                "SELECT * FROM translations WHERE owner_id = ? "
                "ORDER BY saved_at DESC, rowid DESC",
                (owner_id,),
            ) as cursor:
                return [_row_to_record(row) async for row in cursor]

    async def update(
        self, translation_id: str, owner_id: str, patch: TranslationPatch
    ) -> SavedTranslation:
        """Overwrite the fields present in ``patch`` and refresh the timestamp

        Ownership is checked before validation, and both before any write.
        """
        async with self._connect() as db:
            record = await self._fetch_owned(db, translation_id, owner_id)

            title = record.title
            lyrics = record.lyrics_text
            sections = record.sections
            if patch.title is not None:
                title = validate_title(patch.title)
            if patch.lyrics_text is not None:
                lyrics = validate_lyrics(patch.lyrics_text)
            if patch.sections is not None:
                sections = validate_sections(patch.sections)

            await db.execute(
                "UPDATE translations SET title=?, lyrics=?, sections=?, saved_at=? WHERE id=?",
                (title, lyrics, _dump_sections(sections), now_millis(), translation_id),
            )
            await db.commit()
            return await self._fetch(db, translation_id)

    async def rename(
        self, translation_id: str, owner_id: str, title: str
    ) -> SavedTranslation:
        """Change only the title."""
        return await self.update(translation_id, owner_id, TranslationPatch(title=title))

    async def delete(self, translation_id: str, owner_id: str) -> None:
        """Delete a record after existence and ownership checks."""
        async with self._connect() as db:
            await self._fetch_owned(db, translation_id, owner_id)
            await db.execute("DELETE FROM translations WHERE id = ?", (translation_id,))
            await db.commit()
        logger.info(f"Deleted translation {translation_id}")
