from typing import Optional, List, Tuple, AsyncIterator
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging
import uuid

from codedpad.core.errors import (
    InvalidInput, NotFound, Forbidden, AlreadySaved, StorageFailure
)
from codedpad.db.repositories.file_repository import FileRepository
from codedpad.domains.access import Visibility, normalize_protection
from codedpad.domains.files.entities import File
from codedpad.domains.files.schemas import FileView
from codedpad.storage.blob_store import BlobStore, BlobRef

logger = logging.getLogger(__name__)


def clean_filename(filename: Optional[str]) -> str:
    """Имя файла без клиентского пути"""
    if not filename:
        return ""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return name.strip()[:255]


class FileService:
    """Сервис для работы с файлами: метаданные в БД, байты в хранилище блобов"""

    def __init__(self, session: AsyncSession, blob_store: BlobStore):
        self.session = session
        self.blob_store = blob_store
        self.file_repository = FileRepository(session)

    async def upload_file(
        self,
        owner_id: str,
        stream,
        filename: Optional[str],
        content_type: Optional[str],
        size: Optional[int] = None,
        visibility: Visibility = Visibility.PUBLIC,
        secondary_code: Optional[str] = None
    ) -> uuid.UUID:
        """Загрузка файла: сначала подтвержденная запись блоба, затем метаданные"""
        if not owner_id or not owner_id.strip():
            raise InvalidInput("Owner id is required")
        name = clean_filename(filename)
        if not name:
            raise InvalidInput("File is required")
        code = normalize_protection(visibility, secondary_code)

        blob = await self.blob_store.put(stream, content_type, size)

        try:
            return await self.create_file(
                owner_id=owner_id,
                blob_ref=blob,
                filename=name,
                content_type=content_type,
                size=blob.size,
                visibility=visibility,
                secondary_code=code
            )
        except (SQLAlchemyError, ValueError) as e:
            logger.exception(f"Metadata write failed for blob {blob.id}, removing blob")
            await self.session.rollback()
            await self.blob_store.remove(blob.id)
            raise StorageFailure("Could not save file metadata") from e

    async def create_file(
        self,
        owner_id: str,
        blob_ref: BlobRef,
        filename: str,
        content_type: str,
        size: int,
        visibility: Visibility = Visibility.PUBLIC,
        secondary_code: Optional[str] = None
    ) -> uuid.UUID:
        """Создание метаданных для подтвержденного блоба"""
        file = File.create_file(
            owner_id=owner_id,
            blob_ref=blob_ref.id,
            filename=filename,
            content_type=content_type,
            size=size,
            visibility=visibility,
            secondary_code=normalize_protection(visibility, secondary_code)
        )

        created = await self.file_repository.create(file)
        logger.info(f"File {created.uuid} stored as blob {created.blob_ref} ({created.size} bytes)")
        return created.uuid

    async def list_files(self, owner_id: str, presented_code: Optional[str] = None) -> List[FileView]:
        """Собственные и сохраненные файлы, каждый пропущен через замок"""
        files = await self.file_repository.get_visible_to(owner_id)
        return [FileView.from_entity(f, owner_id, presented_code) for f in files]

    async def save_file(self, file_uuid: uuid.UUID, user_id: str) -> None:
        """Закладка на файл. Повторное сохранение отклоняется без изменений"""
        if not user_id or not user_id.strip():
            raise InvalidInput("User id is required")

        await self._get_or_404(file_uuid)

        if not await self.file_repository.add_save(file_uuid, user_id):
            raise AlreadySaved("File already saved")
        logger.info(f"File {file_uuid} bookmarked")

    async def delete_file(
        self,
        file_uuid: uuid.UUID,
        requester_id: str,
        presented_code: Optional[str] = None
    ) -> None:
        """Удаление файла владельцем: сначала блоб, затем метаданные"""
        file = await self._get_or_404(file_uuid)

        if not file.is_owned_by(requester_id):
            logger.warning(f"Rejected delete of file {file_uuid}: not the owner")
            raise Forbidden("Only the owner can delete this file")

        if file.is_locked_for(presented_code):
            logger.warning(f"Rejected delete of file {file_uuid}: pad-lock mismatch")
            raise Forbidden("Invalid pad lock code")

        await self.blob_store.remove(file.blob_ref)
        await self.file_repository.delete(file_uuid)
        logger.info(f"File {file_uuid} deleted")

    async def download_file(
        self,
        file_uuid: uuid.UUID,
        presented_code: Optional[str] = None
    ) -> Tuple[File, AsyncIterator[bytes]]:
        """Поток байт файла. Замок проверяется до открытия блоба"""
        file = await self._get_or_404(file_uuid)

        if file.is_locked_for(presented_code):
            logger.warning(f"Rejected download of file {file_uuid}: pad-lock mismatch")
            raise Forbidden("Invalid pad lock code")

        stream = await self.blob_store.open(file.blob_ref)
        return file, stream

    async def _get_or_404(self, file_uuid: uuid.UUID) -> File:
        file = await self.file_repository.get_by_uuid(file_uuid)
        if not file:
            raise NotFound("File not found")
        return file
