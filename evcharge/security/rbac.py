"""
Role-Based Access Control

Route access is declared once, in ROUTE_RULES, and enforced by AuthMiddleware.
"""
import logging
import re
from enum import Enum
from typing import List, Optional, Pattern, Tuple

from ..config import settings

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Member roles"""
    USER = "USER"
    ADMIN = "ADMIN"


class Access(Enum):
    """What a route requires from the caller"""
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


ACCESS_ROLES = {
    Access.AUTHENTICATED: {Role.USER, Role.ADMIN},
    Access.ADMIN: {Role.ADMIN},
}


def _compile(pattern: str) -> Pattern:
    # "{id}" style placeholders match a single path segment; the rest is literal
    literals = re.split(r"\{[^/]+\}", pattern)
    return re.compile("^" + "[^/]+".join(re.escape(part) for part in literals) + "/?$")


def _build_rules(api_prefix: str) -> List[Tuple[Optional[str], Pattern, Access]]:
    """(method or None for any, path pattern, access); first match wins."""
    p = api_prefix.rstrip("/")
    table = [
        ("POST", f"{p}/auth/signup", Access.PUBLIC),
        ("POST", f"{p}/auth/login", Access.PUBLIC),
        (None, "/docs", Access.PUBLIC),
        (None, "/docs/oauth2-redirect", Access.PUBLIC),
        (None, "/redoc", Access.PUBLIC),
        (None, "/openapi.json", Access.PUBLIC),
        ("GET", "/healthz", Access.PUBLIC),
        ("GET", "/readyz", Access.PUBLIC),
        ("GET", "/metrics", Access.ADMIN),
        ("POST", f"{p}/stations", Access.ADMIN),
        ("DELETE", f"{p}/stations/{{id}}", Access.ADMIN),
    ]
    return [(method, _compile(path), access) for method, path, access in table]


ROUTE_RULES = _build_rules(settings.api_prefix)


def required_access(method: str, path: str) -> Access:
    """Look up what a request needs; unlisted routes need an authenticated caller."""
    for rule_method, pattern, access in ROUTE_RULES:
        if rule_method is not None and rule_method != method.upper():
            continue
        if pattern.match(path):
            return access
    return Access.AUTHENTICATED


def is_allowed(role: Role, access: Access) -> bool:
    if access == Access.PUBLIC:
        return True
    allowed = role in ACCESS_ROLES[access]
    if not allowed:
        logger.warning(f"Permission denied: {role.value} lacks {access.value} access")
    return allowed
