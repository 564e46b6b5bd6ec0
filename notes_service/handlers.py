"""Request handler layer: maps note operations onto envelope responses.

Each method performs one NoteStore call and wraps the outcome into an
``Envelope`` with the matching HTTP status code. Store exceptions are
translated here and never reach the HTTP framework.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi.responses import JSONResponse

from .metrics import NOTE_OPERATIONS, STORED_NOTES
from .models import Envelope, NotePayload
from .store import NoteNotFoundError, NoteStore, StorageFault

logger = logging.getLogger(__name__)


def success(
    status_code: int = 200,
    message: str | None = None,
    data: dict[str, Any] | None = None,
) -> JSONResponse:
    """Build a ``status: success`` envelope response."""
    envelope = Envelope(status="success", message=message, data=data)
    return JSONResponse(status_code=status_code, content=envelope.to_json())


def fail(status_code: int, message: str) -> JSONResponse:
    """Build a ``status: fail`` envelope response."""
    envelope = Envelope(status="fail", message=message)
    return JSONResponse(status_code=status_code, content=envelope.to_json())


class NoteRequestHandler:
    """Translates the five note operations into store calls and responses."""

    def __init__(self, store: NoteStore) -> None:
        self._store = store

    def add_note(self, payload: NotePayload) -> JSONResponse:
        """Add a note; 201 with its id, or 500 if the store cannot confirm it."""
        try:
            note_id = self._store.add(payload.title, payload.tags, payload.body)
        except StorageFault as exc:
            logger.warning("Add failed: %s", exc)
            self._record("add", "fail")
            return fail(500, "Failed to add note")

        self._record("add", "success")
        return success(
            201,
            message="Note added successfully",
            data={"noteId": note_id},
        )

    def get_all_notes(self) -> JSONResponse:
        """List every note in insertion order."""
        notes = self._store.get_all()
        self._record("get_all", "success")
        return success(
            data={"notes": [n.model_dump(mode="json", by_alias=True) for n in notes]}
        )

    def get_note_by_id(self, note_id: str) -> JSONResponse:
        try:
            note = self._store.get_by_id(note_id)
        except NoteNotFoundError:
            self._record("get_by_id", "not_found")
            return fail(404, "Note not found")

        self._record("get_by_id", "success")
        return success(data={"note": note.model_dump(mode="json", by_alias=True)})

    def edit_note_by_id(self, note_id: str, payload: NotePayload) -> JSONResponse:
        try:
            self._store.edit_by_id(note_id, payload.title, payload.tags, payload.body)
        except NoteNotFoundError:
            logger.warning("Edit failed: note %s not found", note_id)
            self._record("edit_by_id", "not_found")
            return fail(404, "Failed to update note. Id not found")

        self._record("edit_by_id", "success")
        return success(message="Note updated successfully")

    def delete_note_by_id(self, note_id: str) -> JSONResponse:
        try:
            self._store.delete_by_id(note_id)
        except NoteNotFoundError:
            logger.warning("Delete failed: note %s not found", note_id)
            self._record("delete_by_id", "not_found")
            return fail(404, "Failed to delete note. Id not found")

        self._record("delete_by_id", "success")
        return success(message="Note deleted successfully")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record(self, operation: str, outcome: str) -> None:
        NOTE_OPERATIONS.labels(operation=operation, outcome=outcome).inc()
        STORED_NOTES.set(self._store.count)
