from pydantic import Field
from typing import List, Literal, Optional
import uuid

from codedpad.core.schemas import CamelModel
from codedpad.domains.files.schemas import FileView
from codedpad.domains.notes.schemas import NoteView


class ContentResponse(CamelModel):
    notes: List[NoteView]
    files: List[FileView]


class PadlockVerifyRequest(CamelModel):
    """Схема для проверки кода замка"""
    owner_id: str = Field(..., min_length=1, max_length=255)
    content_id: uuid.UUID
    secondary_code: Optional[str] = Field(None, max_length=255)


class UnlockedContent(CamelModel):
    """Содержимое заметки или имя файла после успешной проверки"""
    id: uuid.UUID
    kind: Literal["note", "file"]
    content: str
