"""
Auth v1 Router
Email/password signup and login issuing stateless JWT access tokens
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import ApiResponse, LoginRequest, LoginResponse, SignupRequest, SignupResponse
from ..services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=ApiResponse[SignupResponse], status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    """Register a USER account"""
    member = auth_service.signup(db, payload.email, payload.password, payload.name)
    return ApiResponse.ok(SignupResponse.model_validate(member))


@router.post("/login", response_model=ApiResponse[LoginResponse])
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a Bearer access token"""
    token = auth_service.login(db, payload.email, payload.password)
    return ApiResponse.ok(LoginResponse(access_token=token))
