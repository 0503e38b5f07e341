"""
Bearer-token authentication and role gating.

Every request is matched against the route table in security.rbac; the
handler only runs once the caller's token and role satisfy it.
"""
import logging
from dataclasses import dataclass

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import settings
from ..core.errors import ErrorCode, localized_message, resolve_locale
from ..core.handlers import error_response
from ..core.security import InvalidTokenError, decode_access_token
from ..security.rbac import Access, Role, is_allowed, required_access

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    email: str
    role: Role


def _reject(request: Request, code: ErrorCode) -> JSONResponse:
    locale = resolve_locale(request.headers.get("Accept-Language"), settings.default_locale)
    return error_response(
        code,
        localized_message(code, locale),
        headers={"WWW-Authenticate": "Bearer"} if code is ErrorCode.UNAUTHORIZED else None,
    )


def _bearer_token(request: Request):
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AuthMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request.state.principal = None
        if request.method == "OPTIONS":
            return await call_next(request)

        access = required_access(request.method, request.url.path)
        if access == Access.PUBLIC:
            return await call_next(request)

        token = _bearer_token(request)
        if token is None:
            return _reject(request, ErrorCode.UNAUTHORIZED)

        try:
            claims = decode_access_token(token)
            principal = Principal(email=claims["sub"], role=Role(claims["role"]))
        except (InvalidTokenError, ValueError) as e:
            logger.info(f"Rejected token on {request.method} {request.url.path}: {e}")
            return _reject(request, ErrorCode.UNAUTHORIZED)

        if not is_allowed(principal.role, access):
            return _reject(request, ErrorCode.FORBIDDEN)

        request.state.principal = principal
        return await call_next(request)
