from enum import Enum
from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from civil_registry.core.database import Base
from civil_registry.utils.dates import utcnow


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RegistrationMixin:
    """Identity, workflow and audit columns shared by birth and death records"""

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(String(32), unique=True, nullable=False, index=True)
    certificate_id = Column(String(32), unique=True, nullable=True, index=True)

    # System fields
    submitted_by = Column(Integer, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=RegistrationStatus.PENDING.value, index=True)
    rejection_reason = Column(Text, nullable=True)
    approved_by = Column(Integer, nullable=True)
    approved_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class BirthRegistration(RegistrationMixin, Base):
    __tablename__ = "birth_registrations"

    REGISTRATION_TYPE = "birth"
    APPLICATION_PREFIX = "BR"
    CERTIFICATE_PREFIX = "BC"

    # Child information
    child_first_name = Column(String(100), nullable=False)
    child_last_name = Column(String(100), nullable=False)
    child_sex = Column(String(10), nullable=False)
    birth_date = Column(Date, nullable=False)
    birth_place = Column(Text, nullable=False)

    # Parent information
    father_name = Column(String(200), nullable=False)
    father_national_id = Column(String(50), nullable=False)
    mother_name = Column(String(200), nullable=False)
    mother_national_id = Column(String(50), nullable=False)

    hospital_certificate_url = Column(Text, nullable=True)

    @classmethod
    def place_column(cls):
        return cls.birth_place

    @property
    def place(self) -> str:
        return self.birth_place

    @property
    def display_name(self) -> str:
        return f"{self.child_first_name} {self.child_last_name}"


class DeathRegistration(RegistrationMixin, Base):
    __tablename__ = "death_registrations"

    REGISTRATION_TYPE = "death"
    APPLICATION_PREFIX = "DR"
    CERTIFICATE_PREFIX = "DC"

    # Deceased information
    deceased_name = Column(String(200), nullable=False)
    death_date = Column(Date, nullable=False)
    death_place = Column(Text, nullable=False)
    cause_of_death = Column(Text, nullable=False)

    # Next of kin information
    kin_name = Column(String(200), nullable=False)
    kin_relationship = Column(String(50), nullable=False)
    kin_phone = Column(String(30), nullable=False)
    kin_national_id = Column(String(50), nullable=True)

    medical_certificate_url = Column(Text, nullable=True)

    @classmethod
    def place_column(cls):
        return cls.death_place

    @property
    def place(self) -> str:
        return self.death_place

    @property
    def display_name(self) -> str:
        return self.deceased_name
