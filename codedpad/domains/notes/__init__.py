from codedpad.domains.notes.entities import Note
from codedpad.domains.notes.schemas import (
    NoteCreate, NoteUpdate, NoteDelete, NoteCreated, NoteView
)
from codedpad.domains.notes.services import NoteService

__all__ = [
    "Note",
    "NoteCreate", "NoteUpdate", "NoteDelete", "NoteCreated", "NoteView",
    "NoteService"
]
