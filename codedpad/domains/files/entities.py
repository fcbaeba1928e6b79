import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, List

from codedpad.domains.access import Visibility, is_locked


@dataclass
class SavedBy:
    user_id: str
    saved_at: datetime


class File:
    """Метаданные загруженного файла"""

    def __init__(
        self,
        uuid: uuid.UUID,
        owner_id: str,
        blob_ref: str,
        filename: str,
        content_type: str,
        size: int,
        visibility: Visibility = Visibility.PUBLIC,
        secondary_code: Optional[str] = None,
        saved_by: Optional[List[SavedBy]] = None,
        created_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.owner_id = owner_id
        self.blob_ref = blob_ref
        self.filename = filename
        self.content_type = content_type
        self.size = size
        self.visibility = Visibility(visibility)
        self.secondary_code = secondary_code
        self.saved_by = saved_by or []
        self.created_at = created_at or datetime.now(timezone.utc)

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def is_saved_by(self, user_id: str) -> bool:
        return any(entry.user_id == user_id for entry in self.saved_by)

    def is_locked_for(self, presented_code: Optional[str]) -> bool:
        return is_locked(self.visibility, self.secondary_code, presented_code)

    @classmethod
    def create_file(
        cls,
        owner_id: str,
        blob_ref: str,
        filename: str,
        content_type: str,
        size: int,
        visibility: Visibility,
        secondary_code: Optional[str] = None
    ) -> "File":
        """Создание метаданных для уже сохраненного блоба"""
        return cls(
            uuid=uuid.uuid4(),
            owner_id=owner_id,
            blob_ref=blob_ref,
            filename=filename,
            content_type=content_type,
            size=size,
            visibility=visibility,
            secondary_code=secondary_code
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, File):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"File(uuid={self.uuid}, owner_id={self.owner_id}, filename={self.filename})"
