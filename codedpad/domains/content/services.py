from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from codedpad.core.errors import InvalidInput, NotFound, Forbidden
from codedpad.db.repositories.file_repository import FileRepository
from codedpad.db.repositories.note_repository import NoteRepository
from codedpad.domains.content.schemas import ContentResponse, UnlockedContent
from codedpad.domains.files.schemas import FileView
from codedpad.domains.notes.schemas import NoteView

logger = logging.getLogger(__name__)


class ContentService:
    """Общий вид заметок и файлов владельца и проверка кода замка"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repository = NoteRepository(session)
        self.file_repository = FileRepository(session)

    async def get_content(self, owner_id: str, presented_code: Optional[str] = None) -> ContentResponse:
        """Все заметки и файлы владельца одним ответом"""
        notes = await self.note_repository.get_by_owner(owner_id)
        files = await self.file_repository.get_visible_to(owner_id)

        return ContentResponse(
            notes=[NoteView.from_entity(n, presented_code) for n in notes],
            files=[FileView.from_entity(f, owner_id, presented_code) for f in files]
        )

    async def verify_padlock(
        self,
        owner_id: str,
        content_id: Optional[uuid.UUID],
        secondary_code: Optional[str]
    ) -> UnlockedContent:
        """Разблокировка одной заметки или файла владельца"""
        if not owner_id or not content_id or not secondary_code:
            raise InvalidInput("Missing required fields")

        note = await self.note_repository.get_by_uuid(content_id)
        if note and note.is_owned_by(owner_id):
            if note.is_locked_for(secondary_code):
                logger.warning(f"Invalid pad lock code for note {content_id}")
                raise Forbidden("Invalid pad lock code")
            return UnlockedContent(id=note.uuid, kind="note", content=note.content)

        file = await self.file_repository.get_by_uuid(content_id)
        if file and file.is_owned_by(owner_id):
            if file.is_locked_for(secondary_code):
                logger.warning(f"Invalid pad lock code for file {content_id}")
                raise Forbidden("Invalid pad lock code")
            return UnlockedContent(id=file.uuid, kind="file", content=file.filename)

        raise NotFound("Content not found")
