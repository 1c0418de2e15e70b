"""
Exception handlers that render every failure as the standard envelope:

    {"success": false, "code": <http status>, "error": "<message>", "details": ...}
"""
import logging
import uuid
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.schemas.envelope import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(code: int, message: str, details: Any = None, headers: dict | None = None) -> JSONResponse:
    body = ErrorResponse(code=code, error=message, details=details)
    return JSONResponse(
        status_code=code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _split_detail(detail: Any) -> tuple[str, Any]:
    if isinstance(detail, str):
        return detail, None
    if isinstance(detail, dict):
        return str(detail.get("message") or "Request failed"), detail
    return "Request failed", detail


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message, details = _split_detail(exc.detail)
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, message)
    return _error_response(exc.status_code, message, details, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    summary = "; ".join(f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors)
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        f"Validation failed: {summary}" if summary else "Validation failed",
        errors,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    error_id = uuid.uuid4().hex[:12]
    logger.error(
        "Unhandled exception [%s] on %s %s",
        error_id,
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )

    message = "Internal server error"
    if not settings.is_production:
        message = f"{message}: {exc}"
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        f"{message} (ref {error_id})",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
