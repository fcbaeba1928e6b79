from codedpad.db.repositories.note_repository import NoteRepository
from codedpad.db.repositories.file_repository import FileRepository

__all__ = [
    "NoteRepository",
    "FileRepository"
]
