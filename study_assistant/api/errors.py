"""Translate core errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from study_assistant.core.errors import InvalidArgumentError, StorageError

logger = logging.getLogger(__name__)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Erreur de stockage sur %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "storage_unavailable", "message": str(exc)},
    )


async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "invalid_argument", "message": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)
