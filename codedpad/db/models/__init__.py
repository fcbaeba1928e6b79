from codedpad.db.models.note import Note
from codedpad.db.models.file import File, FileSave

__all__ = [
    "Note",
    "File",
    "FileSave"
]
