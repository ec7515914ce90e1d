from typing import Generic, List, Optional, Type, TypeVar, Union
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from datetime import datetime
from pydantic import BaseModel
import logging
import time

from civil_registry.core.exceptions import (
    InvalidStatusTransition,
    MissingRejectionReason,
    StoreQueryError,
)
from civil_registry.models.registration import (
    BirthRegistration,
    DeathRegistration,
    RegistrationStatus,
)
from civil_registry.utils.dates import utcnow

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", BirthRegistration, DeathRegistration)

MAX_IDENTIFIER_PROBES = 1000
MAX_INSERT_ATTEMPTS = 3


class CRUDRegistration(Generic[ModelType]):
    """Record store for one registration type (birth or death)."""

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        """Retrieve a registration by its numeric ID."""
        return db.query(self.model).filter(self.model.id == id).first()

    def get_by_application_id(self, db: Session, *, application_id: str) -> Optional[ModelType]:
        return db.query(self.model).filter(
            self.model.application_id == application_id
        ).first()

    def get_by_certificate_id(self, db: Session, *, certificate_id: str) -> Optional[ModelType]:
        return db.query(self.model).filter(
            self.model.certificate_id == certificate_id
        ).first()

    def get_by_status(
        self, db: Session, *, status: Union[RegistrationStatus, str], skip: int = 0, limit: int = 100
    ) -> List[ModelType]:
        """Registrations in the given status, newest first."""
        status = RegistrationStatus(status)
        return db.query(self.model).filter(
            self.model.status == status.value
        ).order_by(self.model.created_at.desc()).offset(skip).limit(limit).all()

    def get_pending(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return self.get_by_status(db, status=RegistrationStatus.PENDING, skip=skip, limit=limit)

    def get_by_submitter(
        self, db: Session, *, user_id: int, skip: int = 0, limit: int = 100
    ) -> List[ModelType]:
        """Registrations submitted by one user, newest first."""
        return db.query(self.model).filter(
            self.model.submitted_by == user_id
        ).order_by(self.model.created_at.desc()).offset(skip).limit(limit).all()

    def mint_identifier(self, db: Session, *, column, prefix: str, now: datetime) -> str:
        """
        Build a ``{prefix}-{year}-{6 digits}`` identifier that is not yet used.

        The suffix is seeded from the nanosecond clock and advanced until a free
        value is found; the unique constraint on the column catches any race
        that slips past the check.
        """
        seed = time.time_ns() // 1000
        for offset in range(MAX_IDENTIFIER_PROBES):
            candidate = f"{prefix}-{now.year}-{(seed + offset) % 1_000_000:06d}"
            taken = db.query(self.model.id).filter(column == candidate).first()
            if not taken:
                return candidate
        raise StoreQueryError(f"Could not allocate a free {prefix} identifier for {now.year}")

    def create(
        self, db: Session, *, obj_in: BaseModel, submitted_by: int, now: Optional[datetime] = None
    ) -> ModelType:
        """Create a pending registration with a fresh application ID."""
        now = now or utcnow()
        for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
            application_id = self.mint_identifier(
                db, column=self.model.application_id,
                prefix=self.model.APPLICATION_PREFIX, now=now,
            )
            db_obj = self.model(
                **obj_in.dict(),
                application_id=application_id,
                submitted_by=submitted_by,
                status=RegistrationStatus.PENDING.value,
                created_at=now,
                updated_at=now,
            )
            try:
                db.add(db_obj)
                db.commit()
                db.refresh(db_obj)
                logger.info(
                    f"Created {self.model.REGISTRATION_TYPE} registration {db_obj.application_id} "
                    f"(ID: {db_obj.id}, submitted by: {submitted_by})"
                )
                return db_obj
            except IntegrityError as ie:
                db.rollback()
                logger.warning(
                    f"Application ID collision on {application_id} (attempt {attempt}): {str(ie)}"
                )
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error creating {self.model.REGISTRATION_TYPE} registration: {str(e)}")
                raise StoreQueryError(f"Error creating registration: {str(e)}") from e
        raise StoreQueryError("Could not allocate a unique application ID")

    def update_status(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        status: Union[RegistrationStatus, str],
        reviewed_by: int,
        rejection_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ModelType:
        """
        Move a pending registration to approved or rejected.

        Approval stamps ``approved_at``/``approved_by`` and mints the certificate
        ID. Rejection requires a reason. Anything else raises
        ``InvalidStatusTransition``; the update is conditional on the row still
        being pending, so two reviewers cannot both decide the same record.
        """
        status = RegistrationStatus(status)
        now = now or utcnow()

        if status == RegistrationStatus.PENDING:
            raise InvalidStatusTransition("Registrations cannot be moved back to pending")
        if db_obj.status != RegistrationStatus.PENDING.value:
            raise InvalidStatusTransition(
                f"Registration {db_obj.application_id} is already {db_obj.status}"
            )

        values = {"status": status.value, "updated_at": now}
        if status == RegistrationStatus.REJECTED:
            if not rejection_reason or not rejection_reason.strip():
                raise MissingRejectionReason("A rejection reason is required")
            values["rejection_reason"] = rejection_reason.strip()

        for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
            if status == RegistrationStatus.APPROVED:
                values.update(
                    approved_by=reviewed_by,
                    approved_at=now,
                    certificate_id=self.mint_identifier(
                        db, column=self.model.certificate_id,
                        prefix=self.model.CERTIFICATE_PREFIX, now=now,
                    ),
                )
            try:
                updated = db.query(self.model).filter(
                    self.model.id == db_obj.id,
                    self.model.status == RegistrationStatus.PENDING.value,
                ).update(values, synchronize_session=False)
                db.commit()
            except IntegrityError as ie:
                db.rollback()
                logger.warning(f"Certificate ID collision (attempt {attempt}): {str(ie)}")
                continue
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error updating registration {db_obj.id}: {str(e)}")
                raise StoreQueryError(f"Error updating registration: {str(e)}") from e

            db.refresh(db_obj)
            if not updated:
                raise InvalidStatusTransition(
                    f"Registration {db_obj.application_id} is already {db_obj.status}"
                )
            logger.info(
                f"{self.model.REGISTRATION_TYPE.capitalize()} registration {db_obj.application_id} "
                f"{status.value} by user {reviewed_by}"
                + (f" (certificate {db_obj.certificate_id})" if db_obj.certificate_id else "")
            )
            return db_obj
        raise StoreQueryError("Could not allocate a unique certificate ID")


birth_registration = CRUDRegistration(BirthRegistration)
death_registration = CRUDRegistration(DeathRegistration)
