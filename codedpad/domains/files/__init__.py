from codedpad.domains.files.entities import File, SavedBy
from codedpad.domains.files.schemas import (
    FileUploaded, FileSaveRequest, FileDelete, FileView
)
from codedpad.domains.files.services import FileService

__all__ = [
    "File", "SavedBy",
    "FileUploaded", "FileSaveRequest", "FileDelete", "FileView",
    "FileService"
]
