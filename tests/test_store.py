"""Unit tests for notes_service.store — the in-memory NoteStore."""

from __future__ import annotations

import itertools
import threading
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from notes_service.store import (
    DEFAULT_ID_LENGTH,
    ID_ALPHABET,
    NoteNotFoundError,
    NoteStore,
    StorageFault,
    generate_note_id,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Clock that returns ``start`` and advances by ``step`` per call."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture()
def store() -> NoteStore:
    """A fresh store with a deterministic clock."""
    return NoteStore(clock=FakeClock())


# ---------------------------------------------------------------------------
# Id generation
# ---------------------------------------------------------------------------


class TestGenerateNoteId:
    def test_default_length(self) -> None:
        assert len(generate_note_id()) == DEFAULT_ID_LENGTH

    def test_custom_length(self) -> None:
        assert len(generate_note_id(8)) == 8

    def test_alphabet(self) -> None:
        assert set(generate_note_id(200)) <= set(ID_ALPHABET)

    def test_ids_differ(self) -> None:
        ids = {generate_note_id() for _ in range(500)}
        assert len(ids) == 500


# ---------------------------------------------------------------------------
# Add / get
# ---------------------------------------------------------------------------


class TestAdd:
    def test_add_then_get(self, store: NoteStore) -> None:
        note_id = store.add("Shopping", ["errand"], "Buy milk")
        note = store.get_by_id(note_id)
        assert note.id == note_id
        assert note.title == "Shopping"
        assert note.tags == ["errand"]
        assert note.body == "Buy milk"
        assert note.created_at == note.updated_at == T0

    def test_add_increments_count(self, store: NoteStore) -> None:
        store.add("A", [], "a")
        store.add("B", [], "b")
        assert store.count == 2

    def test_add_accepts_empty_fields(self, store: NoteStore) -> None:
        note_id = store.add("", [], "")
        assert store.get_by_id(note_id).title == ""

    def test_add_copies_tags(self, store: NoteStore) -> None:
        tags = ["a"]
        note_id = store.add("T", tags, "B")
        tags.append("b")
        assert store.get_by_id(note_id).tags == ["a"]

    def test_add_retries_on_id_collision(self) -> None:
        ids = iter(["dup", "dup", "fresh"])
        store = NoteStore(id_factory=lambda: next(ids))
        assert store.add("A", [], "a") == "dup"
        assert store.add("B", [], "b") == "fresh"
        assert store.count == 2

    def test_add_raises_storage_fault_when_ids_exhausted(self) -> None:
        store = NoteStore(id_factory=lambda: "same", max_id_attempts=3)
        store.add("A", [], "a")
        with pytest.raises(StorageFault):
            store.add("B", [], "b")
        assert store.count == 1

    def test_contains(self, store: NoteStore) -> None:
        note_id = store.add("A", [], "a")
        assert store.contains(note_id) is True
        assert store.contains("missing") is False

    def test_add_raises_storage_fault_when_note_not_confirmed(
        self, store: NoteStore
    ) -> None:
        with patch.object(store, "contains", return_value=False):
            with pytest.raises(StorageFault):
                store.add("A", [], "a")

    def test_add_confirms_under_lock(self, store: NoteStore) -> None:
        """A delete from another thread cannot land between append and check."""
        seen_locked: list[bool] = []
        original = store.contains

        def contains(note_id: str) -> bool:
            blocked = threading.Thread(target=lambda: store.count)
            blocked.start()
            blocked.join(timeout=0.05)
            seen_locked.append(blocked.is_alive())
            return original(note_id)

        with patch.object(store, "contains", side_effect=contains):
            store.add("A", [], "a")

        assert seen_locked == [True]

    def test_add_keeps_any_json_values(self, store: NoteStore) -> None:
        note_id = store.add(123, '["errand"]', {"text": "Buy milk"})
        note = store.get_by_id(note_id)
        assert note.title == 123
        assert note.tags == '["errand"]'
        assert note.body == {"text": "Buy milk"}


class TestGetAll:
    def test_empty(self, store: NoteStore) -> None:
        assert store.get_all() == []

    def test_insertion_order(self, store: NoteStore) -> None:
        ids = [store.add(f"Note {i}", [], "body") for i in range(5)]
        assert [n.id for n in store.get_all()] == ids

    def test_returns_snapshot(self, store: NoteStore) -> None:
        store.add("Original", ["x"], "body")
        snapshot = store.get_all()
        snapshot[0].title = "Changed"
        snapshot[0].tags.append("y")
        snapshot.clear()
        stored = store.get_all()
        assert stored[0].title == "Original"
        assert stored[0].tags == ["x"]


class TestGetById:
    def test_unknown_id(self, store: NoteStore) -> None:
        with pytest.raises(NoteNotFoundError) as exc_info:
            store.get_by_id("nope")
        assert exc_info.value.note_id == "nope"

    def test_exact_match_only(self, store: NoteStore) -> None:
        note_id = store.add("A", [], "a")
        with pytest.raises(NoteNotFoundError):
            store.get_by_id(note_id.upper() + "x")
        with pytest.raises(NoteNotFoundError):
            store.get_by_id(note_id[:-1])

    def test_returns_copy(self, store: NoteStore) -> None:
        note_id = store.add("A", ["t"], "a")
        store.get_by_id(note_id).tags.append("mutated")
        assert store.get_by_id(note_id).tags == ["t"]


# ---------------------------------------------------------------------------
# Edit
# ---------------------------------------------------------------------------


class TestEditById:
    def test_edit_replaces_fields(self, store: NoteStore) -> None:
        note_id = store.add("Shopping", ["errand"], "Buy milk")
        store.edit_by_id(note_id, "Shopping v2", ["errand", "urgent"], "Buy milk and eggs")
        note = store.get_by_id(note_id)
        assert note.title == "Shopping v2"
        assert note.tags == ["errand", "urgent"]
        assert note.body == "Buy milk and eggs"

    def test_edit_keeps_id_and_created_at(self, store: NoteStore) -> None:
        note_id = store.add("A", [], "a")
        before = store.get_by_id(note_id)
        edited = store.edit_by_id(note_id, "B", [], "b")
        assert edited.id == before.id
        assert edited.created_at == before.created_at
        assert edited.updated_at > before.updated_at

    def test_updated_at_never_before_created_at(self) -> None:
        clock = FakeClock(step=timedelta(hours=-1))
        store = NoteStore(clock=clock)
        note_id = store.add("A", [], "a")
        note = store.edit_by_id(note_id, "B", [], "b")
        assert note.updated_at >= note.created_at

    def test_edit_unknown_id(self, store: NoteStore) -> None:
        store.add("A", [], "a")
        with pytest.raises(NoteNotFoundError):
            store.edit_by_id("missing", "B", [], "b")
        assert store.get_all()[0].title == "A"

    def test_edit_keeps_position(self, store: NoteStore) -> None:
        ids = [store.add(t, [], "x") for t in ("A", "B", "C")]
        store.edit_by_id(ids[1], "B2", [], "x")
        assert [n.title for n in store.get_all()] == ["A", "B2", "C"]

    def test_edit_copies_values(self, store: NoteStore) -> None:
        note_id = store.add("A", [], "a")
        tags = ["x"]
        store.edit_by_id(note_id, "B", tags, "b")
        tags.append("y")
        assert store.get_by_id(note_id).tags == ["x"]


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


class TestDeleteById:
    def test_delete_removes_note(self, store: NoteStore) -> None:
        keep = store.add("Keep", [], "k")
        gone = store.add("Gone", [], "g")
        store.delete_by_id(gone)
        with pytest.raises(NoteNotFoundError):
            store.get_by_id(gone)
        assert [n.id for n in store.get_all()] == [keep]

    def test_delete_unknown_id(self, store: NoteStore) -> None:
        store.add("A", [], "a")
        with pytest.raises(NoteNotFoundError):
            store.delete_by_id("missing")
        assert store.count == 1

    def test_delete_twice(self, store: NoteStore) -> None:
        note_id = store.add("A", [], "a")
        store.delete_by_id(note_id)
        with pytest.raises(NoteNotFoundError):
            store.delete_by_id(note_id)


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrency:
    def test_parallel_adds(self) -> None:
        counter = itertools.count()
        store = NoteStore(id_factory=lambda: f"id-{next(counter)}")

        def worker():
            for _ in range(50):
                store.add("T", [], "B")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        notes = store.get_all()
        assert len(notes) == 400
        assert len({n.id for n in notes}) == 400
