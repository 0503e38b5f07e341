# Schemas package
from .common import ApiResponse, ErrorDetail, PageResponse
from .auth import SignupRequest, SignupResponse, LoginRequest, LoginResponse
from .station import StationRequest, StationResponse
from .charger import CreateChargerRequest, ChargerStatusRequest, ChargerResponse
from .session import SessionCompleteRequest, SessionResponse

__all__ = [
    "ApiResponse", "ErrorDetail", "PageResponse",
    "SignupRequest", "SignupResponse", "LoginRequest", "LoginResponse",
    "StationRequest", "StationResponse",
    "CreateChargerRequest", "ChargerStatusRequest", "ChargerResponse",
    "SessionCompleteRequest", "SessionResponse",
]
