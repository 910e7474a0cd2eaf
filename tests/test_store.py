"""Tests for the saved translation store"""

import itertools

import aiosqlite
import pytest

from songlens.errors import (
    NotFoundError,
    PersistenceError,
    PersistenceValidationError,
    UnauthorizedError,
)
from songlens.storage import TranslationDraft, TranslationPatch, TranslationStore
from songlens.storage import store as store_module
from songlens.translators import Section

SECTION = Section(
    kind="verse",
    original_text="Line one\nLine two",
    translation_text="Linea uno\nLinea dos",
    analysis_text="Opening",
)


@pytest.fixture(autouse=True)
def fake_clock(monkeypatch):
    ticks = itertools.count(1_700_000_000_000, 1000)
    monkeypatch.setattr(store_module, "now_millis", lambda: next(ticks))


def make_draft(title="My song", lyrics="Line one\nLine two", sections=None):
    return TranslationDraft(
        title=title, lyrics_text=lyrics, sections=[SECTION] if sections is None else sections
    )


async def test_create_and_get(store):
    translation_id = await store.create("alice", make_draft())
    record = await store.get(translation_id, "alice")

    assert record.id == translation_id
    assert record.owner_id == "alice"
    assert record.title == "My song"
    assert record.sections == [SECTION]
    assert record.saved_at_millis == 1_700_000_000_000


async def test_list_is_scoped_and_newest_first(store):
    first = await store.create("alice", make_draft(title="First"))
    await store.create("bob", make_draft(title="Not yours"))
    second = await store.create("alice", make_draft(title="Second"))

    records = await store.list("alice")
    assert [r.id for r in records] == [second, first]


async def test_title_over_limit_rejected_before_write(store):
    with pytest.raises(PersistenceValidationError) as exc_info:
        await store.create("alice", make_draft(title="x" * 201))
    assert exc_info.value.code == "invalid-title"
    assert await store.list("alice") == []


@pytest.mark.parametrize(
    "draft_kwargs,code",
    [
        ({"title": "   "}, "invalid-title"),
        ({"lyrics": ""}, "invalid-lyrics"),
        ({"lyrics": "a" * 3001}, "invalid-lyrics"),
        ({"sections": [SECTION] * 51}, "invalid-sections"),
    ],
)
async def test_create_validation_codes(store, draft_kwargs, code):
    with pytest.raises(PersistenceValidationError) as exc_info:
        await store.create("alice", make_draft(**draft_kwargs))
    assert exc_info.value.code == code


async def test_title_is_stripped(store):
    translation_id = await store.create("alice", make_draft(title="  Padded  "))
    assert (await store.get(translation_id, "alice")).title == "Padded"


async def test_update_by_other_user_is_rejected(store):
    translation_id = await store.create("alice", make_draft())
    before = await store.get(translation_id, "alice")

    with pytest.raises(UnauthorizedError):
        await store.update(translation_id, "mallory", TranslationPatch(title="Hacked"))

    assert await store.get(translation_id, "alice") == before


async def test_update_overwrites_given_fields_and_refreshes_timestamp(store):
    translation_id = await store.create("alice", make_draft())
    before = await store.get(translation_id, "alice")

    updated = await store.update(
        translation_id, "alice", TranslationPatch(lyrics_text="New\nLyrics", sections=[])
    )

    assert updated.title == before.title
    assert updated.lyrics_text == "New\nLyrics"
    assert updated.sections == []
    assert updated.saved_at_millis > before.saved_at_millis


async def test_update_validation_leaves_record_unchanged(store):
    translation_id = await store.create("alice", make_draft())
    before = await store.get(translation_id, "alice")

    with pytest.raises(PersistenceValidationError):
        await store.update(translation_id, "alice", TranslationPatch(title="y" * 250))

    assert await store.get(translation_id, "alice") == before


async def test_rename(store):
    translation_id = await store.create("alice", make_draft())
    renamed = await store.rename(translation_id, "alice", "Better title")
    assert renamed.title == "Better title"

    with pytest.raises(UnauthorizedError):
        await store.rename(translation_id, "bob", "Stolen")


async def test_delete(store):
    translation_id = await store.create("alice", make_draft())

    with pytest.raises(UnauthorizedError):
        await store.delete(translation_id, "bob")

    await store.delete(translation_id, "alice")
    with pytest.raises(NotFoundError):
        await store.get(translation_id, "alice")


async def test_missing_records_are_not_found(store):
    with pytest.raises(NotFoundError):
        await store.delete("missing", "alice")
    with pytest.raises(NotFoundError):
        await store.update("missing", "alice", TranslationPatch(title="x"))


async def test_storage_errors_are_normalized(tmp_path):
    broken = TranslationStore(str(tmp_path / "no-such-dir" / "db.sqlite"))
    with pytest.raises(PersistenceError) as exc_info:
        await broken.init()
    assert not isinstance(exc_info.value, aiosqlite.Error)
