from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List
import uuid

from codedpad.core.db import get_db
from codedpad.core.schemas import MessageResponse
from codedpad.domains.notes.schemas import (
    NoteCreate, NoteUpdate, NoteDelete, NoteCreated, NoteView
)
from codedpad.domains.notes.services import NoteService

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("", response_model=NoteCreated, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_data: NoteCreate,
    db: AsyncSession = Depends(get_db)
):
    """Создание новой заметки"""
    note_service = NoteService(db)

    note_id = await note_service.create_note(
        owner_id=note_data.owner_id,
        title=note_data.title,
        content=note_data.content,
        visibility=note_data.visibility,
        secondary_code=note_data.secondary_code
    )

    return NoteCreated(note_id=note_id)


@router.get("/item/{note_uuid}", response_model=NoteView, response_model_exclude_none=True)
async def get_note(
    note_uuid: uuid.UUID,
    secondary_code: Optional[str] = Query(None, alias="secondaryCode"),
    db: AsyncSession = Depends(get_db)
):
    """Получение заметки по UUID"""
    note_service = NoteService(db)
    return await note_service.get_note(note_uuid, secondary_code)


@router.put("/item/{note_uuid}", response_model=NoteView, response_model_exclude_none=True)
async def update_note(
    note_uuid: uuid.UUID,
    update_data: NoteUpdate,
    secondary_code: Optional[str] = Query(None, alias="secondaryCode"),
    db: AsyncSession = Depends(get_db)
):
    """Повторное сохранение заметки"""
    note_service = NoteService(db)

    return await note_service.update_note(
        note_uuid,
        update_data.requester_id,
        title=update_data.title,
        content=update_data.content,
        presented_code=secondary_code
    )


@router.get("/{owner_id}", response_model=List[NoteView], response_model_exclude_none=True)
async def list_notes(
    owner_id: str,
    secondary_code: Optional[str] = Query(None, alias="secondaryCode"),
    db: AsyncSession = Depends(get_db)
):
    """Заметки владельца"""
    note_service = NoteService(db)
    return await note_service.list_notes(owner_id, secondary_code)


@router.delete("/{note_uuid}", response_model=MessageResponse)
async def delete_note(
    note_uuid: uuid.UUID,
    delete_data: NoteDelete,
    db: AsyncSession = Depends(get_db)
):
    """Удаление заметки"""
    note_service = NoteService(db)
    await note_service.delete_note(note_uuid, delete_data.requester_id)
    return MessageResponse(message="Note deleted")
