from pydantic import BaseModel, validator
from typing import Optional
from datetime import date, datetime

from civil_registry.utils.dates import utcnow

VALID_SEXES = ['male', 'female']
REVIEW_STATUSES = ['approved', 'rejected']


def _clean_name(v: str) -> str:
    if not v or len(v.strip()) < 2:
        raise ValueError('Name must be at least 2 characters long')
    return v.strip().title()


class BirthRegistrationBase(BaseModel):
    child_first_name: str
    child_last_name: str
    child_sex: str
    birth_date: date
    birth_place: str
    father_name: str
    father_national_id: str
    mother_name: str
    mother_national_id: str
    hospital_certificate_url: Optional[str] = None

    @validator('child_sex')
    def validate_child_sex(cls, v):
        if v.lower() not in VALID_SEXES:
            raise ValueError('Child sex must be Male or Female')
        return v.title()

    @validator('child_first_name', 'child_last_name', 'father_name', 'mother_name')
    def validate_names(cls, v):
        return _clean_name(v)

    @validator('birth_place')
    def validate_birth_place(cls, v):
        if not v or not v.strip():
            raise ValueError('Birth place is required')
        return v.strip()

    @validator('birth_date')
    def validate_birth_date(cls, v):
        if v > utcnow().date():
            raise ValueError('Birth date cannot be in the future')
        return v


class BirthRegistrationCreate(BirthRegistrationBase):
    pass


class BirthRegistration(BirthRegistrationBase):
    id: int
    application_id: str
    certificate_id: Optional[str] = None
    submitted_by: int
    status: str
    rejection_reason: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DeathRegistrationBase(BaseModel):
    deceased_name: str
    death_date: date
    death_place: str
    cause_of_death: str
    kin_name: str
    kin_relationship: str
    kin_phone: str
    kin_national_id: Optional[str] = None
    medical_certificate_url: Optional[str] = None

    @validator('deceased_name', 'kin_name')
    def validate_names(cls, v):
        return _clean_name(v)

    @validator('death_place', 'cause_of_death', 'kin_relationship')
    def validate_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError('Field is required')
        return v.strip()

    @validator('kin_phone')
    def validate_kin_phone(cls, v):
        digits = [c for c in v if c.isdigit()]
        if len(digits) < 7:
            raise ValueError('Kin phone must contain at least 7 digits')
        return v.strip()

    @validator('death_date')
    def validate_death_date(cls, v):
        if v > utcnow().date():
            raise ValueError('Death date cannot be in the future')
        return v


class DeathRegistrationCreate(DeathRegistrationBase):
    pass


class DeathRegistration(DeathRegistrationBase):
    id: int
    application_id: str
    certificate_id: Optional[str] = None
    submitted_by: int
    status: str
    rejection_reason: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StatusUpdate(BaseModel):
    status: str
    rejection_reason: Optional[str] = None


class CertificateVerification(BaseModel):
    valid: bool
    type: Optional[str] = None
    certificateId: Optional[str] = None
    fullName: Optional[str] = None
    issueDate: Optional[datetime] = None
    registrationOffice: Optional[str] = None
    message: Optional[str] = None
