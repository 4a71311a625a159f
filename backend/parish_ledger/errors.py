# backend/parish_ledger/errors.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = logging.getLogger("parish_ledger.errors")


class DuesError(Exception):
    """Base for request-terminating dues failures. None of these are retried."""

    status_code = 500
    code = "dues_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(DuesError):
    status_code = 404
    code = "not_found"


class Forbidden(DuesError):
    status_code = 403
    code = "forbidden"


class InvalidYear(DuesError):
    status_code = 400
    code = "invalid_year"


class DataIntegrityError(DuesError):
    status_code = 500
    code = "data_integrity"

    def __init__(self, message: str, *, posting_id: int | None = None):
        super().__init__(message)
        self.posting_id = posting_id


async def _dues_error_handler(request: Request, exc: DuesError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error(exc.message, extra={"path": request.url.path})
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": {"code": exc.code, "message": exc.message}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DuesError, _dues_error_handler)
