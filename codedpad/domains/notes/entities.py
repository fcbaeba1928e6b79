import uuid
from datetime import datetime, timezone
from typing import Optional

from codedpad.domains.access import Visibility, is_locked


class Note:
    """Сущность заметки"""

    def __init__(
        self,
        uuid: uuid.UUID,
        owner_id: str,
        title: str,
        content: str,
        visibility: Visibility = Visibility.PUBLIC,
        secondary_code: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.owner_id = owner_id
        self.title = title
        self.content = content
        self.visibility = Visibility(visibility)
        self.secondary_code = secondary_code
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def is_locked_for(self, presented_code: Optional[str]) -> bool:
        return is_locked(self.visibility, self.secondary_code, presented_code)

    def replace(self, title: Optional[str] = None, content: Optional[str] = None) -> None:
        """Полная замена заголовка и/или содержимого при повторном сохранении"""
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        self.updated_at = datetime.now(timezone.utc)

    @classmethod
    def create_note(
        cls,
        owner_id: str,
        title: str,
        content: str,
        visibility: Visibility,
        secondary_code: Optional[str] = None
    ) -> "Note":
        """Создание новой заметки"""
        return cls(
            uuid=uuid.uuid4(),
            owner_id=owner_id,
            title=title,
            content=content,
            visibility=visibility,
            secondary_code=secondary_code
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Note):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Note(uuid={self.uuid}, owner_id={self.owner_id}, visibility={self.visibility.value})"
