"""Thin HTTP client for the notes service.

All functions return the parsed JSON envelope or raise on failure.
"""

from __future__ import annotations

import os
from typing import Any

import requests

BASE_URL = os.getenv("NOTES_API_URL", "http://localhost:5000")
_TIMEOUT = 10  # seconds


def add_note(
    title: str, body: str, tags: list[str] | None = None, base_url: str = BASE_URL
) -> dict[str, Any]:
    """POST /notes — add a note; the new id is in ``data.noteId``."""
    resp = requests.post(
        f"{base_url}/notes",
        json={"title": title, "tags": tags or [], "body": body},
        timeout=_TIMEOUT,
    )
    resp.raise_for_status()
    return resp.json()


def get_notes(base_url: str = BASE_URL) -> dict[str, Any]:
    """GET /notes — list all notes."""
    resp = requests.get(f"{base_url}/notes", timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def get_note(note_id: str, base_url: str = BASE_URL) -> dict[str, Any]:
    """GET /notes/{id} — fetch one note."""
    resp = requests.get(f"{base_url}/notes/{note_id}", timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def edit_note(
    note_id: str,
    title: str,
    body: str,
    tags: list[str] | None = None,
    base_url: str = BASE_URL,
) -> dict[str, Any]:
    """PUT /notes/{id} — replace a note's title, tags and body."""
    resp = requests.put(
        f"{base_url}/notes/{note_id}",
        json={"title": title, "tags": tags or [], "body": body},
        timeout=_TIMEOUT,
    )
    resp.raise_for_status()
    return resp.json()


def delete_note(note_id: str, base_url: str = BASE_URL) -> dict[str, Any]:
    """DELETE /notes/{id} — remove a note."""
    resp = requests.delete(f"{base_url}/notes/{note_id}", timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def get_health(base_url: str = BASE_URL) -> dict[str, Any]:
    """GET /health — service status and note count."""
    resp = requests.get(f"{base_url}/health", timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()
