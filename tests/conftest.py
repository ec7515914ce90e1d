"""Global test fixtures."""

import itertools
import os
from datetime import date, datetime

# Settings are read when civil_registry.core.config is first imported,
# so the environment must be in place at module load time.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-for-unit-tests-min-32")
os.environ.setdefault("FIRST_SUPERUSER_EMAIL", "admin@example.com")
os.environ.setdefault("FIRST_SUPERUSER_PASSWORD", "admin-password")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from civil_registry.core.database import Base, get_db
from civil_registry.core.security import create_access_token
from civil_registry.crud.user import user as user_crud
from civil_registry.main import app
from civil_registry.models.registration import (
    BirthRegistration,
    DeathRegistration,
    RegistrationStatus,
)
from civil_registry.models.user import UserRole
from civil_registry.schemas.user import UserCreate

# Wednesday; the Sunday-start week began on Oct 11
NOW = datetime(2026, 10, 14, 15, 30)

_sequence = itertools.count(1)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def db():
    """Per-test in-memory SQLite session."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db):
    """API client whose requests share the test session."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Create a user with the given role."""
    def _make_user(role=UserRole.PUBLIC, email=None, password="secret-password"):
        email = email or f"user{next(_sequence)}@example.com"
        return user_crud.create(
            db, obj_in=UserCreate(email=email, password=password, full_name="Test User"), role=role
        )
    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _auth_headers


def _status_fields(prefix, status, created_at, approved_at, rejection_reason):
    n = next(_sequence)
    fields = {
        "application_id": f"{prefix[0]}-{created_at.year}-{n:06d}",
        "status": status,
        "created_at": created_at,
        "updated_at": approved_at or created_at,
        "submitted_by": 1,
    }
    if status == RegistrationStatus.APPROVED.value:
        fields.update(
            certificate_id=f"{prefix[1]}-{created_at.year}-{n:06d}",
            approved_at=approved_at,
            approved_by=2,
        )
    if status == RegistrationStatus.REJECTED.value:
        fields["rejection_reason"] = rejection_reason or "Incomplete documents"
    return fields


@pytest.fixture
def add_birth(db):
    """Insert a birth registration row directly, bypassing the record store."""
    def _add_birth(
        created_at=NOW,
        status="pending",
        approved_at=None,
        place="Korle Bu Teaching Hospital",
        first_name="Ama",
        last_name="Mensah",
        rejection_reason=None,
    ):
        record = BirthRegistration(
            child_first_name=first_name,
            child_last_name=last_name,
            child_sex="Female",
            birth_date=date(2026, 9, 1),
            birth_place=place,
            father_name="Kwame Mensah",
            father_national_id="GHA-000000001-1",
            mother_name="Akosua Mensah",
            mother_national_id="GHA-000000002-2",
            **_status_fields(("BR", "BC"), status, created_at, approved_at, rejection_reason),
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    return _add_birth


@pytest.fixture
def add_death(db):
    """Insert a death registration row directly, bypassing the record store."""
    def _add_death(
        created_at=NOW,
        status="pending",
        approved_at=None,
        place="Komfo Anokye Hospital, Kumasi",
        name="Yaw Boateng",
        rejection_reason=None,
    ):
        record = DeathRegistration(
            deceased_name=name,
            death_date=date(2026, 9, 1),
            death_place=place,
            cause_of_death="Natural causes",
            kin_name="Abena Boateng",
            kin_relationship="Daughter",
            kin_phone="+233 20 000 0000",
            **_status_fields(("DR", "DC"), status, created_at, approved_at, rejection_reason),
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    return _add_death
