from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
import uuid

from codedpad.db.models.note import Note as NoteModel

if TYPE_CHECKING:
    from codedpad.domains.notes.entities import Note


class NoteRepository:
    """Репозиторий для работы с заметками"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, note: "Note") -> "Note":
        """Создание новой заметки"""
        db_note = NoteModel(
            uuid=note.uuid,
            owner_id=note.owner_id,
            title=note.title,
            content=note.content,
            visibility=note.visibility,
            secondary_code=note.secondary_code,
            created_at=note.created_at,
            updated_at=note.updated_at
        )

        self.session.add(db_note)
        await self.session.commit()
        await self.session.refresh(db_note)
        return self._to_domain(db_note)

    async def get_by_uuid(self, note_uuid: uuid.UUID) -> Optional["Note"]:
        """Получение заметки по UUID"""
        result = await self.session.execute(
            select(NoteModel).where(NoteModel.uuid == note_uuid)
        )
        db_note = result.scalar_one_or_none()
        return self._to_domain(db_note) if db_note else None

    async def get_by_owner(self, owner_id: str) -> List["Note"]:
        """Получение заметок владельца, новые первыми"""
        result = await self.session.execute(
            select(NoteModel)
            .where(NoteModel.owner_id == owner_id)
            .order_by(NoteModel.created_at.desc())
        )
        return [self._to_domain(note) for note in result.scalars().all()]

    async def update(self, note: "Note") -> "Note":
        """Замена заголовка и содержимого заметки"""
        await self.session.execute(
            update(NoteModel)
            .where(NoteModel.uuid == note.uuid)
            .values(
                title=note.title,
                content=note.content,
                updated_at=note.updated_at
            )
        )
        await self.session.commit()

        return await self.get_by_uuid(note.uuid)

    async def delete(self, note_uuid: uuid.UUID) -> bool:
        """Удаление заметки"""
        result = await self.session.execute(
            delete(NoteModel).where(NoteModel.uuid == note_uuid)
        )
        await self.session.commit()
        return result.rowcount > 0

    def _to_domain(self, db_note: NoteModel) -> "Note":
        """Преобразование модели БД в доменную сущность"""
        from codedpad.domains.notes.entities import Note

        return Note(
            uuid=db_note.uuid,
            owner_id=db_note.owner_id,
            title=db_note.title,
            content=db_note.content,
            visibility=db_note.visibility,
            secondary_code=db_note.secondary_code,
            created_at=db_note.created_at,
            updated_at=db_note.updated_at
        )
