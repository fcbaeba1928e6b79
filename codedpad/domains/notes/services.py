from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from codedpad.core.config import settings
from codedpad.core.errors import InvalidInput, NotFound, Forbidden
from codedpad.db.repositories.note_repository import NoteRepository
from codedpad.domains.access import Visibility, normalize_protection
from codedpad.domains.notes.entities import Note
from codedpad.domains.notes.schemas import NoteView

logger = logging.getLogger(__name__)


class NoteService:
    """Сервис для работы с заметками"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repository = NoteRepository(session)

    async def create_note(
        self,
        owner_id: str,
        title: Optional[str],
        content: str,
        visibility: Visibility = Visibility.PUBLIC,
        secondary_code: Optional[str] = None
    ) -> uuid.UUID:
        """Создание новой заметки"""
        if not owner_id or not owner_id.strip():
            raise InvalidInput("Owner id is required")
        if not content or not content.strip():
            raise InvalidInput("Content is required")

        note = Note.create_note(
            owner_id=owner_id,
            title=self._title_or_default(title),
            content=content,
            visibility=visibility,
            secondary_code=normalize_protection(visibility, secondary_code)
        )

        created = await self.note_repository.create(note)
        logger.info(f"Note {created.uuid} created ({created.visibility.value})")
        return created.uuid

    async def list_notes(self, owner_id: str, presented_code: Optional[str] = None) -> List[NoteView]:
        """Все заметки владельца, пропущенные через замок"""
        notes = await self.note_repository.get_by_owner(owner_id)
        return [NoteView.from_entity(note, presented_code) for note in notes]

    async def get_note(self, note_uuid: uuid.UUID, presented_code: Optional[str] = None) -> NoteView:
        """Получение одной заметки, замок применяется так же, как в списке"""
        note = await self._get_or_404(note_uuid)
        return NoteView.from_entity(note, presented_code)

    async def update_note(
        self,
        note_uuid: uuid.UUID,
        requester_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        presented_code: Optional[str] = None
    ) -> NoteView:
        """Повторное сохранение заметки владельцем"""
        note = await self._get_or_404(note_uuid)

        if not note.is_owned_by(requester_id):
            logger.warning(f"Rejected update of note {note_uuid}: not the owner")
            raise Forbidden("Only the owner can modify this note")

        if content is not None and not content.strip():
            raise InvalidInput("Content cannot be empty")

        note.replace(
            title=self._title_or_default(title) if title is not None else None,
            content=content
        )
        updated = await self.note_repository.update(note)
        return NoteView.from_entity(updated, presented_code)

    async def delete_note(self, note_uuid: uuid.UUID, requester_id: str) -> None:
        """Удаление заметки, только владельцем"""
        note = await self._get_or_404(note_uuid)

        if not note.is_owned_by(requester_id):
            logger.warning(f"Rejected delete of note {note_uuid}: not the owner")
            raise Forbidden("Only the owner can delete this note")

        if not await self.note_repository.delete(note_uuid):
            raise NotFound("Note not found")
        logger.info(f"Note {note_uuid} deleted")

    async def _get_or_404(self, note_uuid: uuid.UUID) -> Note:
        note = await self.note_repository.get_by_uuid(note_uuid)
        if not note:
            raise NotFound("Note not found")
        return note

    @staticmethod
    def _title_or_default(title: Optional[str]) -> str:
        if title is None or not title.strip():
            return settings.default_note_title
        return title.strip()
