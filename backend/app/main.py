from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.auth import router as auth_router
from .api.jobs import router as jobs_router
from .api.users import router as users_router
from .core.config import Settings, settings as default_settings
from .core.errors import JobBoardError, StorageError, Unauthenticated
from .core.logging import configure_logging
from .db.models import JobRecord, UserRecord
from .db.records import JsonRecordStore
from .services.board import JobBoard


logger = logging.getLogger(__name__)


def _cors_allow_origins(settings: Settings) -> list[str]:
    """CORS origins for browser-based clients (e.g. Streamlit).

    Configure with `CORS_ALLOW_ORIGINS` as a comma-separated list.
    Defaults to local dev Streamlit origins.
    """
    env = settings.cors_allow_origins.strip()
    if env:
        return [o.strip().rstrip("/") for o in env.split(",") if o.strip()]
    return [
        "http://localhost:8501",
        "http://127.0.0.1:8501",
    ]


def build_board(settings: Settings) -> JobBoard:
    jobs = JsonRecordStore(settings.jobs_path, JobRecord.from_dict, JobRecord.to_dict)
    users = JsonRecordStore(settings.users_path, UserRecord.from_dict, UserRecord.to_dict)
    return JobBoard(jobs, users)


def create_app(settings: Optional[Settings] = None, board: Optional[JobBoard] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.board = board or build_board(settings)

    @app.get("/")
    def root() -> dict:
        return {"ok": True, "docs": "/docs", "health": "/healthz"}

    @app.get("/healthz")
    def healthz() -> dict:
        return {"ok": True}

    @app.exception_handler(JobBoardError)
    async def job_board_error(request: Request, exc: JobBoardError) -> JSONResponse:
        headers = None
        if isinstance(exc, Unauthenticated):
            headers = {"WWW-Authenticate": "Basic"}
        if isinstance(exc, StorageError):
            logger.error("storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "error": exc.kind},
            headers=headers,
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %d (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(settings),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(jobs_router)
    return app

