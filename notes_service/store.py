"""In-memory note store.

Notes are kept in insertion order in a plain list and looked up by linear
scan. Every public method takes the store lock, and everything handed back
to callers is a deep copy, so no live references escape the store.
"""

import copy
import logging
import secrets
import string
import threading
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import JsonValue

from .models import Note

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_letters + string.digits + "_-"
DEFAULT_ID_LENGTH = 16
MAX_ID_ATTEMPTS = 5


class NoteServiceError(Exception):
    """Base class for note store errors."""


class NoteNotFoundError(NoteServiceError):
    """No stored note has the requested id."""

    def __init__(self, note_id: str) -> None:
        super().__init__(f"Note {note_id!r} not found")
        self.note_id = note_id


class StorageFault(NoteServiceError):
    """A new note could not be stored."""


def generate_note_id(size: int = DEFAULT_ID_LENGTH) -> str:
    """Return a random URL-safe id of ``size`` characters."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(size))


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class NoteStore:
    """Ordered in-memory collection of notes with CRUD operations."""

    def __init__(
        self,
        id_factory: Callable[[], str] = generate_note_id,
        clock: Callable[[], datetime] = utc_now,
        max_id_attempts: int = MAX_ID_ATTEMPTS,
    ) -> None:
        self._notes: list[Note] = []
        self._lock = threading.RLock()
        self._id_factory = id_factory
        self._clock = clock
        self._max_id_attempts = max_id_attempts

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def add(self, title: JsonValue, tags: JsonValue, body: JsonValue) -> str:
        """Create a note and return its generated id.

        The new note is looked up again before the lock is released, so a
        returned id always refers to a stored note.

        Raises:
            StorageFault: if no unused id could be generated or the note
                is missing after the append.
        """
        with self._lock:
            note_id = self._new_id()
            now = self._clock()
            self._notes.append(
                Note(
                    id=note_id,
                    title=copy.deepcopy(title),
                    tags=copy.deepcopy(tags),
                    body=copy.deepcopy(body),
                    created_at=now,
                    updated_at=now,
                )
            )
            if not self.contains(note_id):
                raise StorageFault(f"Note {note_id} missing after append")
        logger.info("Added note %s", note_id)
        return note_id

    def get_all(self) -> list[Note]:
        """Return a snapshot of every stored note in insertion order."""
        with self._lock:
            return [note.model_copy(deep=True) for note in self._notes]

    def get_by_id(self, note_id: str) -> Note:
        """Return a copy of the note with ``note_id``.

        Raises:
            NoteNotFoundError: if no note has that id.
        """
        with self._lock:
            return self._notes[self._index_of(note_id)].model_copy(deep=True)

    def edit_by_id(
        self, note_id: str, title: JsonValue, tags: JsonValue, body: JsonValue
    ) -> Note:
        """Replace title, tags and body of a note and refresh ``updated_at``.

        Raises:
            NoteNotFoundError: if no note has that id.
        """
        with self._lock:
            index = self._index_of(note_id)
            current = self._notes[index]
            edited = current.model_copy(
                update={
                    "title": copy.deepcopy(title),
                    "tags": copy.deepcopy(tags),
                    "body": copy.deepcopy(body),
                    # never before created_at
                    "updated_at": max(self._clock(), current.created_at),
                },
                deep=True,
            )
            self._notes[index] = edited
        logger.info("Edited note %s", note_id)
        return edited.model_copy(deep=True)

    def delete_by_id(self, note_id: str) -> None:
        """Remove the note with ``note_id``.

        Raises:
            NoteNotFoundError: if no note has that id.
        """
        with self._lock:
            del self._notes[self._index_of(note_id)]
        logger.info("Deleted note %s", note_id)

    def contains(self, note_id: str) -> bool:
        """Whether a note with ``note_id`` is stored."""
        with self._lock:
            return any(note.id == note_id for note in self._notes)

    @property
    def count(self) -> int:
        """Number of stored notes."""
        with self._lock:
            return len(self._notes)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _index_of(self, note_id: str) -> int:
        """Index of the first note with ``note_id``; caller holds the lock."""
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                return index
        logger.debug("Note %s not found", note_id)
        raise NoteNotFoundError(note_id)

    def _new_id(self) -> str:
        """Generate an id not used by any stored note; caller holds the lock."""
        for _ in range(self._max_id_attempts):
            note_id = self._id_factory()
            if not any(note.id == note_id for note in self._notes):
                return note_id
            logger.warning("Generated id %s collides with a stored note, retrying", note_id)
        raise StorageFault(
            f"Could not generate an unused note id after {self._max_id_attempts} attempts"
        )
