"""
Auth Service
Member signup and password login
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import BusinessError, ErrorCode
from ..core.security import create_access_token, hash_password, verify_password
from ..db import unit_of_work
from ..models import Member
from ..security.rbac import Role

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_member(db: Session, email: str, password: str, name: str, role: Role = Role.USER) -> Member:
    email = normalize_email(email)
    if db.query(Member).filter(Member.email == email).first():
        raise BusinessError(ErrorCode.DUPLICATE_EMAIL)

    member = Member(
        email=email,
        password=hash_password(password),
        name=name,
        role=role,
    )
    try:
        with unit_of_work(db):
            db.add(member)
    except IntegrityError:
        raise BusinessError(ErrorCode.DUPLICATE_EMAIL)
    db.refresh(member)
    return member


def signup(db: Session, email: str, password: str, name: str) -> Member:
    """
    Register a new member with role USER.

    Raises:
        BusinessError(DUPLICATE_EMAIL): If the email is already registered
    """
    member = create_member(db, email, password, name, Role.USER)
    logger.info(f"Member {member.id} signed up")
    return member


def login(db: Session, email: str, password: str) -> str:
    """
    Check credentials and issue an access token carrying email and role.

    Raises:
        BusinessError(INVALID_CREDENTIALS): Unknown email or wrong password
    """
    member = db.query(Member).filter(Member.email == normalize_email(email)).first()
    if not member or not verify_password(password, member.password):
        logger.info("Login failed")
        raise BusinessError(ErrorCode.INVALID_CREDENTIALS)
    return create_access_token(member.email, member.role.value)
