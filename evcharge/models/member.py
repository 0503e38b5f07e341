from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Enum as SQLEnum
from ..db import Base
from ..security.rbac import Role


class Member(Base):
    """Registered API user. Role is fixed at creation."""
    __tablename__ = "member"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # passlib hash, never the plain text
    name = Column(String(100), nullable=False)
    role = Column(SQLEnum(Role, native_enum=False), nullable=False, default=Role.USER)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
