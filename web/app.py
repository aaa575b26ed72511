from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from usersapi.db import dispose_engine, initialize_db
from usersapi.errors import ApiError
from usersapi.logging import configure_logging
from usersapi.offload import configure_workers
from usersapi.settings import get_settings
from web.routes.users import router as users_router

logger = logging.getLogger(__name__)


def error_response(message: str) -> JSONResponse:
    return JSONResponse(f"Internal Server Error: {message}", status_code=500)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings)
    configure_workers(settings.worker_threads)
    if settings.run_migrations:
        initialize_db()
    logger.info("Application started")
    yield
    dispose_engine()
    logger.info("Application stopped")


app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

app.include_router(users_router)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    logger.error(
        "%s failure on %s %s: %s",
        exc.kind,
        request.method,
        request.url.path,
        exc.cause,
    )
    return error_response(str(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return error_response(str(exc))
