from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from civil_registry.api import deps
from civil_registry.core.config import settings
from civil_registry.crud.registration import birth_registration, death_registration
from civil_registry.models.registration import RegistrationStatus
from civil_registry.schemas.registration import CertificateVerification

router = APIRouter()

@router.get("/{certificate_id}", response_model=CertificateVerification, response_model_exclude_none=True)
def verify_certificate(
    *,
    db: Session = Depends(deps.get_db),
    certificate_id: str,
) -> Any:
    """Public certificate verification; only approved records verify"""
    for crud in (birth_registration, death_registration):
        record = crud.get_by_certificate_id(db, certificate_id=certificate_id)
        if record and record.status == RegistrationStatus.APPROVED.value:
            return CertificateVerification(
                valid=True,
                type=crud.model.REGISTRATION_TYPE,
                certificateId=record.certificate_id,
                fullName=record.display_name,
                issueDate=record.approved_at,
                registrationOffice=settings.REGISTRATION_OFFICE,
            )

    return CertificateVerification(valid=False, message="Certificate not found or not approved")
