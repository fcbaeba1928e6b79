from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from codedpad.core.db import get_db
from codedpad.domains.content.schemas import (
    ContentResponse, PadlockVerifyRequest, UnlockedContent
)
from codedpad.domains.content.services import ContentService

router = APIRouter(prefix="/content", tags=["content"])


@router.post("/verify", response_model=UnlockedContent)
async def verify_padlock(
    verify_data: PadlockVerifyRequest,
    db: AsyncSession = Depends(get_db)
):
    """Проверка кода замка для одной записи"""
    content_service = ContentService(db)

    return await content_service.verify_padlock(
        verify_data.owner_id,
        verify_data.content_id,
        verify_data.secondary_code
    )


@router.get("/{owner_id}", response_model=ContentResponse, response_model_exclude_none=True)
async def get_content(
    owner_id: str,
    secondary_code: Optional[str] = Query(None, alias="secondaryCode"),
    db: AsyncSession = Depends(get_db)
):
    """Заметки и файлы владельца одним запросом"""
    content_service = ContentService(db)
    return await content_service.get_content(owner_id, secondary_code)
