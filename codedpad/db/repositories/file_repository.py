from typing import Optional, List, TYPE_CHECKING
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
import uuid

from codedpad.db.models.file import File as FileModel, FileSave as FileSaveModel

if TYPE_CHECKING:
    from codedpad.domains.files.entities import File


class FileRepository:
    """Репозиторий для работы с метаданными файлов"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, file: "File") -> "File":
        """Создание записи о файле"""
        db_file = FileModel(
            uuid=file.uuid,
            owner_id=file.owner_id,
            blob_ref=file.blob_ref,
            filename=file.filename,
            content_type=file.content_type,
            size=file.size,
            visibility=file.visibility,
            secondary_code=file.secondary_code,
            created_at=file.created_at,
            updated_at=file.created_at
        )

        self.session.add(db_file)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ValueError("Blob reference already in use")

        return await self.get_by_uuid(file.uuid)

    async def get_by_uuid(self, file_uuid: uuid.UUID) -> Optional["File"]:
        """Получение файла по UUID"""
        result = await self.session.execute(
            select(FileModel)
            .options(selectinload(FileModel.saves))
            .execution_options(populate_existing=True)
            .where(FileModel.uuid == file_uuid)
        )
        db_file = result.scalar_one_or_none()
        return self._to_domain(db_file) if db_file else None

    async def get_visible_to(self, user_id: str) -> List["File"]:
        """Собственные файлы пользователя и сохраненные им чужие файлы"""
        saved_ids = select(FileSaveModel.file_id).where(FileSaveModel.user_id == user_id)

        result = await self.session.execute(
            select(FileModel)
            .options(selectinload(FileModel.saves))
            .execution_options(populate_existing=True)
            .where(or_(FileModel.owner_id == user_id, FileModel.uuid.in_(saved_ids)))
            .order_by(FileModel.created_at.desc())
        )
        return [self._to_domain(f) for f in result.scalars().all()]

    async def add_save(self, file_uuid: uuid.UUID, user_id: str) -> bool:
        """Добавление закладки. False, если пользователь уже сохранил файл"""
        existing = await self.session.execute(
            select(FileSaveModel.id).where(
                and_(
                    FileSaveModel.file_id == file_uuid,
                    FileSaveModel.user_id == user_id
                )
            )
        )
        if existing.scalar_one_or_none() is not None:
            return False

        self.session.add(FileSaveModel(file_id=file_uuid, user_id=user_id))
        try:
            await self.session.commit()
        except IntegrityError:
            # Параллельное сохранение тем же пользователем
            await self.session.rollback()
            return False
        return True

    async def delete(self, file_uuid: uuid.UUID) -> bool:
        """Удаление записи о файле вместе с закладками"""
        await self.session.execute(
            delete(FileSaveModel).where(FileSaveModel.file_id == file_uuid)
        )
        result = await self.session.execute(
            delete(FileModel).where(FileModel.uuid == file_uuid)
        )
        await self.session.commit()
        return result.rowcount > 0

    def _to_domain(self, db_file: FileModel) -> "File":
        """Преобразование модели БД в доменную сущность"""
        from codedpad.domains.files.entities import File, SavedBy

        return File(
            uuid=db_file.uuid,
            owner_id=db_file.owner_id,
            blob_ref=db_file.blob_ref,
            filename=db_file.filename,
            content_type=db_file.content_type,
            size=db_file.size,
            visibility=db_file.visibility,
            secondary_code=db_file.secondary_code,
            saved_by=[SavedBy(user_id=s.user_id, saved_at=s.saved_at) for s in db_file.saves],
            created_at=db_file.created_at
        )
