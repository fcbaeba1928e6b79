from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from codedpad import __version__
from codedpad.core.config import settings
from codedpad.core.db import engine, init_models
from codedpad.core.errors import PadError, InvalidInput, StorageFailure
from codedpad.core.logging import setup_logging
from codedpad.api.http.health import router as health_router
from codedpad.api.http.notes import router as notes_router
from codedpad.api.http.files import router as files_router
from codedpad.api.http.content import router as content_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    if settings.create_tables:
        await init_models(engine)
    logger.info("Coded Pad started")
    yield
    await engine.dispose()


app = FastAPI(
    title="Coded Pad",
    description="Notes and files stored under an access code, with optional pad-lock codes",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PadError)
async def pad_error_handler(request: Request, exc: PadError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Значения полей не возвращаем: среди них могут быть коды замков
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    error = InvalidInput("; ".join(problems) or None)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    error = StorageFailure()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Подключаем роутеры
app.include_router(health_router)
app.include_router(notes_router)
app.include_router(files_router)
app.include_router(content_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "Coded Pad API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }
