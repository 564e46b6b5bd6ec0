"""Pydantic models for the notes service."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, JsonValue
from pydantic.alias_generators import to_camel


class Note(BaseModel):
    """A single stored note with its timestamps.

    ``title``, ``tags`` and ``body`` hold whatever JSON the client sent.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Opaque unique note identifier")
    title: JsonValue = Field(..., description="Note title")
    tags: JsonValue = Field(default_factory=list, description="Note tags")
    body: JsonValue = Field(..., description="Free-text note body")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last update timestamp (UTC)")


class NotePayload(BaseModel):
    """Request body for creating or editing a note.

    Only presence is checked: ``title`` and ``body`` must be sent, and any
    JSON value is accepted for each field.
    """

    title: JsonValue = Field(...)
    body: JsonValue = Field(...)
    tags: JsonValue = Field(default_factory=list)


class Envelope(BaseModel):
    """Uniform response wrapper returned by every notes endpoint."""

    status: Literal["success", "fail"]
    message: str | None = None
    data: dict[str, Any] | None = None

    def to_json(self) -> dict[str, Any]:
        """JSON-ready dict with unset optional fields dropped."""
        return self.model_dump(mode="json", exclude_none=True)
