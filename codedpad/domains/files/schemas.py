from pydantic import Field
from typing import Optional
from datetime import datetime
import uuid

from codedpad.core.schemas import CamelModel
from codedpad.domains.access import Visibility
from codedpad.domains.files.entities import File


class FileUploaded(CamelModel):
    file_id: uuid.UUID


class FileSaveRequest(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=255)


class FileDelete(CamelModel):
    requester_id: str = Field(..., min_length=1, max_length=255)
    secondary_code: Optional[str] = Field(None, max_length=255)


class FileView(CamelModel):
    """Метаданные файла в том виде, в котором они уходят клиенту"""
    id: uuid.UUID
    owner_id: str
    filename: Optional[str] = None
    content_type: str
    size: int
    visibility: Visibility
    is_locked: bool
    is_owner: bool
    is_saved: bool
    saved_count: int
    created_at: datetime

    @classmethod
    def from_entity(
        cls,
        file: File,
        viewer_id: Optional[str] = None,
        presented_code: Optional[str] = None
    ) -> "FileView":
        locked = file.is_locked_for(presented_code)
        return cls(
            id=file.uuid,
            owner_id=file.owner_id,
            filename=None if locked else file.filename,
            content_type=file.content_type,
            size=file.size,
            visibility=file.visibility,
            is_locked=locked,
            is_owner=viewer_id is not None and file.is_owned_by(viewer_id),
            is_saved=viewer_id is not None and file.is_saved_by(viewer_id),
            saved_count=len(file.saved_by),
            created_at=file.created_at
        )
