from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from codedpad.core.schemas import CamelModel
from codedpad.domains.access import Visibility
from codedpad.domains.notes.entities import Note


class NoteCreate(CamelModel):
    """Схема для создания заметки"""
    owner_id: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    content: str = Field(..., max_length=1000000)
    visibility: Visibility = Visibility.PUBLIC
    secondary_code: Optional[str] = Field(None, max_length=255)

    @field_validator('owner_id')
    @classmethod
    def validate_owner_id(cls, v):
        if not v.strip():
            raise ValueError('Owner id cannot be empty')
        return v


class NoteUpdate(CamelModel):
    """Схема для повторного сохранения заметки"""
    requester_id: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = Field(None, max_length=1000000)


class NoteDelete(CamelModel):
    requester_id: str = Field(..., min_length=1, max_length=255)


class NoteCreated(CamelModel):
    note_id: uuid.UUID


class NoteView(CamelModel):
    """Заметка в том виде, в котором она уходит клиенту"""
    id: uuid.UUID
    owner_id: str
    title: str
    content: Optional[str] = None
    visibility: Visibility
    is_locked: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, note: Note, presented_code: Optional[str] = None) -> "NoteView":
        locked = note.is_locked_for(presented_code)
        return cls(
            id=note.uuid,
            owner_id=note.owner_id,
            title=note.title,
            content=None if locked else note.content,
            visibility=note.visibility,
            is_locked=locked,
            created_at=note.created_at,
            updated_at=note.updated_at
        )
