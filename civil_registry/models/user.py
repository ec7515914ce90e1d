from enum import Enum
from sqlalchemy import Boolean, Column, DateTime, Integer, String
from civil_registry.core.database import Base
from civil_registry.utils.dates import utcnow


class UserRole(str, Enum):
    PUBLIC = "public"
    HEALTH_WORKER = "health_worker"
    REGISTRAR = "registrar"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.PUBLIC.value)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
