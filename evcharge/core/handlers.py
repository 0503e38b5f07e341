"""
Exception handlers that turn every failure into the response envelope.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import settings
from .errors import BusinessError, ErrorCode, localized_message, resolve_locale

logger = logging.getLogger(__name__)

HTTP_STATUS_CODES = {
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
}


def _locale(request: Request) -> str:
    return resolve_locale(request.headers.get("Accept-Language"), settings.default_locale)


def error_response(code: ErrorCode, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=code.http_status,
        content={"success": False, "error": {"code": code.name, "message": message}},
        headers=headers,
    )


def _message(code: ErrorCode, locale: str, detail=None) -> str:
    if locale == "en":
        return detail or code.default_message
    message = localized_message(code, locale)
    return f"{message} ({detail})" if detail else message


def format_validation_errors(errors) -> str:
    """Join every field violation into one "field: message, ..." string."""
    parts = []
    for err in errors:
        # loc is ("body", "name") / ("query", "lat"); drop the source prefix
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
        field = ".".join(loc) or "request"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return ", ".join(parts) or ErrorCode.VALIDATION_ERROR.default_message


async def business_error_handler(request: Request, exc: BusinessError):
    return error_response(exc.code, _message(exc.code, _locale(request), exc.detail))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    detail = format_validation_errors(exc.errors())
    return error_response(
        ErrorCode.VALIDATION_ERROR,
        _message(ErrorCode.VALIDATION_ERROR, _locale(request), detail),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = HTTP_STATUS_CODES.get(exc.status_code)
    if code is None:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": {"code": "HTTP_ERROR", "message": str(exc.detail)}},
        )
    return error_response(code, localized_message(code, _locale(request)), headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    trace_id = getattr(request.state, "trace_id", None)
    logger.exception(f"Unhandled error on {request.method} {request.url.path} (trace_id={trace_id})")
    code = ErrorCode.INTERNAL_ERROR
    return error_response(code, localized_message(code, _locale(request)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BusinessError, business_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
