from fastapi import APIRouter, Depends, Query, Form, UploadFile, status
from fastapi import File as FileField
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List
from urllib.parse import quote
import uuid

from codedpad.core.db import get_db
from codedpad.core.schemas import MessageResponse
from codedpad.domains.access import Visibility
from codedpad.domains.files.schemas import (
    FileUploaded, FileSaveRequest, FileDelete, FileView
)
from codedpad.domains.files.services import FileService
from codedpad.storage.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/files", tags=["files"])


@router.post("", response_model=FileUploaded, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = FileField(...),
    owner_id: str = Form(..., alias="ownerId"),
    visibility: Visibility = Form(Visibility.PUBLIC),
    secondary_code: Optional[str] = Form(None, alias="secondaryCode"),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Загрузка файла"""
    file_service = FileService(db, blob_store)

    try:
        file_id = await file_service.upload_file(
            owner_id=owner_id,
            stream=file,
            filename=file.filename,
            content_type=file.content_type,
            size=file.size,
            visibility=visibility,
            secondary_code=secondary_code
        )
    finally:
        await file.close()

    return FileUploaded(file_id=file_id)


@router.get("/{owner_id}", response_model=List[FileView], response_model_exclude_none=True)
async def list_files(
    owner_id: str,
    secondary_code: Optional[str] = Query(None, alias="secondaryCode"),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Файлы владельца и сохраненные им файлы"""
    file_service = FileService(db, blob_store)
    return await file_service.list_files(owner_id, secondary_code)


@router.post("/{file_uuid}/save", response_model=MessageResponse)
async def save_file(
    file_uuid: uuid.UUID,
    save_data: FileSaveRequest,
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Сохранение чужого файла в свой список"""
    file_service = FileService(db, blob_store)
    await file_service.save_file(file_uuid, save_data.user_id)
    return MessageResponse(message="File saved")


@router.get("/{file_uuid}/download")
async def download_file(
    file_uuid: uuid.UUID,
    secondary_code: Optional[str] = Query(None, alias="secondaryCode"),
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
) -> StreamingResponse:
    """Скачивание файла"""
    file_service = FileService(db, blob_store)
    file, stream = await file_service.download_file(file_uuid, secondary_code)

    return StreamingResponse(
        stream,
        media_type=file.content_type,
        headers={
            "Content-Length": str(file.size),
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(file.filename)}"
        }
    )


@router.delete("/{file_uuid}", response_model=MessageResponse)
async def delete_file(
    file_uuid: uuid.UUID,
    delete_data: FileDelete,
    db: AsyncSession = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store)
):
    """Удаление файла владельцем"""
    file_service = FileService(db, blob_store)
    await file_service.delete_file(file_uuid, delete_data.requester_id, delete_data.secondary_code)
    return MessageResponse(message="File deleted")
