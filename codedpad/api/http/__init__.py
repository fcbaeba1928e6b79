from codedpad.api.http.health import router as health_router
from codedpad.api.http.notes import router as notes_router
from codedpad.api.http.files import router as files_router
from codedpad.api.http.content import router as content_router

__all__ = [
    "health_router",
    "notes_router",
    "files_router",
    "content_router"
]
