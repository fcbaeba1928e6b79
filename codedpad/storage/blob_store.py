"""Blob storage for uploaded file bytes.

Bytes are streamed to a temporary location, flushed and published under a
fresh reference. A reference is handed back only after the read path can
locate the blob with the expected size.
"""

import asyncio
import inspect
import logging
import os
import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import AsyncIterator, BinaryIO, Iterable, Optional

from fastapi.concurrency import run_in_threadpool

from codedpad.core.config import settings
from codedpad.core.errors import (
    PadError, NotFound, PayloadTooLarge, StorageFailure, UnsupportedMediaType
)

logger = logging.getLogger(__name__)

_REF_RE = re.compile(r"^[0-9a-f]{32}$")


@dataclass(frozen=True)
class BlobRef:
    id: str
    size: int


def new_blob_ref() -> str:
    return uuid.uuid4().hex


def media_type(content_type: str) -> str:
    """Тип содержимого без параметров вроде charset"""
    return content_type.split(";")[0].strip().lower()


def validate_ref(ref: str) -> str:
    if not isinstance(ref, str) or not _REF_RE.match(ref):
        raise ValueError(f"Invalid blob reference: {ref!r}")
    return ref


class BlobBackend(ABC):
    """Abstract base class for blob storage backends."""

    @abstractmethod
    def open_write(self, ref: str) -> BinaryIO:
        """Open a temporary, not yet visible, location for the blob."""

    @abstractmethod
    def commit(self, ref: str, handle: BinaryIO) -> None:
        """Flush the temporary data and make it readable under ``ref``."""

    @abstractmethod
    def discard(self, ref: str, handle: Optional[BinaryIO] = None) -> None:
        """Drop any partial data written for ``ref``."""

    @abstractmethod
    def open_read(self, ref: str) -> BinaryIO:
        """Open a committed blob. Raises FileNotFoundError if missing."""

    @abstractmethod
    def size(self, ref: str) -> Optional[int]:
        """Size of a committed blob, or None if it can't be located."""

    @abstractmethod
    def delete(self, ref: str) -> bool:
        """Delete a committed blob. Returns False if it was already gone."""


class LocalBlobBackend(BlobBackend):
    """Local filesystem backend, two-level fan-out by reference prefix."""

    def __init__(self, base_path: str = "data/blobs"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, ref: str) -> Path:
        validate_ref(ref)
        return self.base_path / ref[:2] / ref

    def _part_path(self, ref: str) -> Path:
        return self._path(ref).with_suffix(".part")

    def open_write(self, ref: str) -> BinaryIO:
        part = self._part_path(ref)
        part.parent.mkdir(parents=True, exist_ok=True)
        return open(part, "xb")

    def commit(self, ref: str, handle: BinaryIO) -> None:
        handle.flush()
        os.fsync(handle.fileno())
        handle.close()
        os.replace(self._part_path(ref), self._path(ref))

    def discard(self, ref: str, handle: Optional[BinaryIO] = None) -> None:
        if handle is not None and not handle.closed:
            handle.close()
        try:
            self._part_path(ref).unlink()
        except FileNotFoundError:
            pass

    def open_read(self, ref: str) -> BinaryIO:
        return open(self._path(ref), "rb")

    def size(self, ref: str) -> Optional[int]:
        try:
            return self._path(ref).stat().st_size
        except FileNotFoundError:
            return None

    def delete(self, ref: str) -> bool:
        try:
            self._path(ref).unlink()
            return True
        except FileNotFoundError:
            return False


class BlobStore:
    """Upload sink and download source on top of a BlobBackend."""

    def __init__(
        self,
        backend: BlobBackend,
        max_size: int = 10 * 1024 * 1024,
        allowed_content_types: Iterable[str] = (),
        chunk_size: int = 64 * 1024,
        confirm_timeout: float = 5.0,
        confirm_interval: float = 0.1
    ):
        self.backend = backend
        self.max_size = max_size
        self.allowed_content_types = frozenset(allowed_content_types)
        self.chunk_size = chunk_size
        self.confirm_timeout = confirm_timeout
        self.confirm_interval = confirm_interval

    @classmethod
    def create_local(cls, base_path: str, **kwargs) -> "BlobStore":
        return cls(LocalBlobBackend(base_path), **kwargs)

    def check_upload(self, content_type: Optional[str], declared_size: Optional[int]) -> None:
        """Проверка ограничений до начала записи"""
        if not content_type or media_type(content_type) not in self.allowed_content_types:
            raise UnsupportedMediaType(f"File type not allowed: {content_type}")
        if declared_size is not None and declared_size > self.max_size:
            raise PayloadTooLarge(f"File exceeds the {self.max_size} byte limit")

    async def put(
        self,
        stream,
        content_type: Optional[str],
        declared_size: Optional[int] = None
    ) -> BlobRef:
        """Сохранение потока байт. Возвращает ссылку только после подтверждения записи"""
        self.check_upload(content_type, declared_size)

        ref = new_blob_ref()
        try:
            handle = await run_in_threadpool(self.backend.open_write, ref)
        except OSError as e:
            logger.exception(f"Could not open blob {ref} for writing")
            raise StorageFailure() from e

        written = 0
        try:
            async for chunk in self._read_chunks(stream):
                written += len(chunk)
                if written > self.max_size:
                    raise PayloadTooLarge(f"File exceeds the {self.max_size} byte limit")
                await run_in_threadpool(handle.write, chunk)
            await run_in_threadpool(self.backend.commit, ref, handle)
        except PadError:
            await run_in_threadpool(self.backend.discard, ref, handle)
            raise
        except OSError as e:
            await run_in_threadpool(self.backend.discard, ref, handle)
            logger.exception(f"Write of blob {ref} failed")
            raise StorageFailure() from e
        except BaseException:
            # Обрыв соединения или отмена запроса
            await run_in_threadpool(self.backend.discard, ref, handle)
            raise

        await self._confirm(ref, written)
        logger.info(f"Stored blob {ref} ({written} bytes)")
        return BlobRef(id=ref, size=written)

    async def _read_chunks(self, stream) -> AsyncIterator[bytes]:
        if hasattr(stream, "read"):
            while True:
                chunk = stream.read(self.chunk_size)
                if inspect.isawaitable(chunk):
                    chunk = await chunk
                if not chunk:
                    return
                yield chunk
        else:
            async for chunk in stream:
                if chunk:
                    yield chunk

    async def _confirm(self, ref: str, expected_size: int) -> None:
        """Ожидание, пока блоб станет виден на пути чтения"""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.confirm_timeout

        while True:
            found = await run_in_threadpool(self.backend.size, ref)
            if found == expected_size:
                return
            if loop.time() >= deadline:
                break
            await asyncio.sleep(self.confirm_interval)

        logger.warning(f"Blob {ref} not confirmed within {self.confirm_timeout}s (found size {found})")
        await run_in_threadpool(self.backend.discard, ref)
        await run_in_threadpool(self.backend.delete, ref)
        raise StorageFailure("Upload could not be verified")

    async def open(self, ref: str) -> AsyncIterator[bytes]:
        """Открытие блоба для потокового чтения. NotFound до первого байта"""
        try:
            handle = await run_in_threadpool(self.backend.open_read, ref)
        except (FileNotFoundError, ValueError):
            raise NotFound("File content not found")
        except OSError as e:
            logger.exception(f"Could not open blob {ref}")
            raise StorageFailure() from e

        return self._iter_handle(handle)

    async def _iter_handle(self, handle: BinaryIO) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await run_in_threadpool(handle.read, self.chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            handle.close()

    async def exists(self, ref: str) -> bool:
        try:
            return await run_in_threadpool(self.backend.size, ref) is not None
        except ValueError:
            return False

    async def remove(self, ref: str) -> bool:
        """Удаление блоба. Повторное удаление не считается ошибкой"""
        try:
            removed = await run_in_threadpool(self.backend.delete, ref)
        except ValueError:
            return False
        except OSError as e:
            logger.exception(f"Could not delete blob {ref}")
            raise StorageFailure() from e

        if not removed:
            logger.info(f"Blob {ref} already absent")
        return removed


@lru_cache()
def get_blob_store() -> BlobStore:
    return BlobStore.create_local(
        settings.storage_dir,
        max_size=settings.max_upload_size,
        allowed_content_types=settings.allowed_content_types,
        chunk_size=settings.blob_chunk_size,
        confirm_timeout=settings.blob_confirm_timeout,
        confirm_interval=settings.blob_confirm_interval
    )
