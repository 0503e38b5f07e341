from datetime import datetime, timedelta
from typing import Optional, Any, Dict
from jose import jwt, JWTError
from passlib.context import CryptContext
from ..config import settings

# Use PBKDF2-SHA256 (no 72-byte limit like bcrypt)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

TOKEN_TYPE = "Bearer"


class InvalidTokenError(Exception):
    """Token is malformed, badly signed, expired or missing required claims."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(email: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed, time-limited JWT access token.

    Args:
        email: Member email - used as JWT sub claim
        role: Member role name ("USER" or "ADMIN")
        expires_delta: Optional lifetime override (negative values mint expired tokens)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    now = datetime.utcnow()
    payload: Dict[str, Any] = {
        "sub": email,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry, and return the claims.

    Raises:
        InvalidTokenError: If the token cannot be trusted
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    if not payload.get("sub") or not payload.get("role"):
        raise InvalidTokenError("Missing sub or role claim")
    return payload
