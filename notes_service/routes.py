"""HTTP routes for the /notes resource."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from .handlers import NoteRequestHandler
from .models import NotePayload

router = APIRouter(prefix="/notes", tags=["Notes"])


def get_handler(request: Request) -> NoteRequestHandler:
    """Return the handler owned by the running app."""
    return request.app.state.handler


@router.post("", status_code=201)
def add_note(
    payload: NotePayload, handler: NoteRequestHandler = Depends(get_handler)
) -> JSONResponse:
    """Create a note."""
    return handler.add_note(payload)


@router.get("")
def get_all_notes(handler: NoteRequestHandler = Depends(get_handler)) -> JSONResponse:
    """List all notes."""
    return handler.get_all_notes()


@router.get("/{note_id}")
def get_note_by_id(
    note_id: str, handler: NoteRequestHandler = Depends(get_handler)
) -> JSONResponse:
    """Fetch one note."""
    return handler.get_note_by_id(note_id)


@router.put("/{note_id}")
def edit_note_by_id(
    note_id: str,
    payload: NotePayload,
    handler: NoteRequestHandler = Depends(get_handler),
) -> JSONResponse:
    """Replace a note's title, tags and body."""
    return handler.edit_note_by_id(note_id, payload)


@router.delete("/{note_id}")
def delete_note_by_id(
    note_id: str, handler: NoteRequestHandler = Depends(get_handler)
) -> JSONResponse:
    """Delete a note."""
    return handler.delete_note_by_id(note_id)
