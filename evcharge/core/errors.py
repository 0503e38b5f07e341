"""
Business error taxonomy.

Every expected failure of a domain operation is a BusinessError carrying an
ErrorCode; the boundary layer turns it into the response envelope.
"""
from enum import Enum
from typing import Optional

from fastapi import status


class ErrorCode(Enum):
    STATION_NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Charging station not found")
    CHARGER_NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Charger not found")
    SESSION_NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Charging session not found")
    INVALID_STATUS_TRANSITION = (status.HTTP_400_BAD_REQUEST, "Invalid charger status transition")
    VALIDATION_ERROR = (status.HTTP_400_BAD_REQUEST, "Validation failed")
    CHARGER_NOT_AVAILABLE = (status.HTTP_409_CONFLICT, "Charger is not available")
    SESSION_ALREADY_COMPLETED = (status.HTTP_409_CONFLICT, "Charging session is already completed")
    DUPLICATE_EMAIL = (status.HTTP_409_CONFLICT, "Email is already in use")
    DUPLICATE_STATION_CODE = (status.HTTP_409_CONFLICT, "Station code is already in use")
    INVALID_CREDENTIALS = (status.HTTP_401_UNAUTHORIZED, "Invalid email or password")
    UNAUTHORIZED = (status.HTTP_401_UNAUTHORIZED, "Authentication required")
    FORBIDDEN = (status.HTTP_403_FORBIDDEN, "Access denied")
    NOT_FOUND = (status.HTTP_404_NOT_FOUND, "Resource not found")
    METHOD_NOT_ALLOWED = (status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")
    INTERNAL_ERROR = (status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @property
    def http_status(self) -> int:
        return self.value[0]

    @property
    def default_message(self) -> str:
        return self.value[1]


# Korean catalog, selected through Accept-Language
MESSAGES_KO = {
    ErrorCode.STATION_NOT_FOUND: "충전소를 찾을 수 없습니다",
    ErrorCode.CHARGER_NOT_FOUND: "충전기를 찾을 수 없습니다",
    ErrorCode.SESSION_NOT_FOUND: "충전 세션을 찾을 수 없습니다",
    ErrorCode.INVALID_STATUS_TRANSITION: "유효하지 않은 상태 전이입니다",
    ErrorCode.VALIDATION_ERROR: "입력값이 올바르지 않습니다",
    ErrorCode.CHARGER_NOT_AVAILABLE: "충전기가 사용 가능 상태가 아닙니다",
    ErrorCode.SESSION_ALREADY_COMPLETED: "이미 완료된 충전 세션입니다",
    ErrorCode.DUPLICATE_EMAIL: "이미 사용 중인 이메일입니다",
    ErrorCode.DUPLICATE_STATION_CODE: "이미 사용 중인 충전소 코드입니다",
    ErrorCode.INVALID_CREDENTIALS: "이메일 또는 비밀번호가 올바르지 않습니다",
    ErrorCode.UNAUTHORIZED: "인증이 필요합니다",
    ErrorCode.FORBIDDEN: "접근 권한이 없습니다",
    ErrorCode.NOT_FOUND: "요청한 리소스를 찾을 수 없습니다",
    ErrorCode.METHOD_NOT_ALLOWED: "허용되지 않은 메서드입니다",
    ErrorCode.INTERNAL_ERROR: "서버 내부 오류가 발생했습니다",
}


def localized_message(code: ErrorCode, locale: str = "en") -> str:
    if locale == "ko":
        return MESSAGES_KO.get(code, code.default_message)
    return code.default_message


class BusinessError(Exception):
    """Expected, recoverable failure of a domain operation."""

    def __init__(self, code: ErrorCode, detail: Optional[str] = None):
        self.code = code
        # detail overrides the catalog message (used for aggregated validation text)
        self.detail = detail
        super().__init__(detail or code.default_message)


def resolve_locale(accept_language: Optional[str], default: str = "en") -> str:
    """Pick "ko" or "en" from an Accept-Language header."""
    if not accept_language:
        return default
    first = accept_language.split(",")[0].strip().lower()
    if first.startswith("ko"):
        return "ko"
    if first.startswith("en"):
        return "en"
    return default
