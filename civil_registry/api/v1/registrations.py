from typing import Any, List, Type
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from civil_registry.api import deps
from civil_registry.core.exceptions import AuthorizationError
from civil_registry.crud.registration import CRUDRegistration
from civil_registry.models.user import User
from civil_registry.schemas.registration import REVIEW_STATUSES, StatusUpdate


def make_registration_router(
    crud: CRUDRegistration,
    create_schema: Type[BaseModel],
    read_schema: Type[BaseModel],
) -> APIRouter:
    """Build the submit/list/read/review routes for one registration type."""
    label = crud.model.REGISTRATION_TYPE
    router = APIRouter()

    def get_visible_record(db: Session, record_id_or_app_id, current_user: User, by_application: bool = False):
        if by_application:
            record = crud.get_by_application_id(db, application_id=record_id_or_app_id)
        else:
            record = crud.get(db=db, id=record_id_or_app_id)
        if not record:
            raise HTTPException(status_code=404, detail=f"{label.capitalize()} registration not found")
        if record.submitted_by != current_user.id and not deps.is_reviewer(current_user):
            raise AuthorizationError(f"Insufficient permissions to view this {label} registration")
        return record

    @router.post("/", response_model=read_schema, status_code=status.HTTP_201_CREATED)
    def create_registration(
        *,
        db: Session = Depends(deps.get_db),
        record_in: create_schema,
        current_user: User = Depends(
            deps.require_roles(*deps.SUBMITTER_ROLES, action=f"submit {label} registrations")
        ),
    ) -> Any:
        """Submit a new registration; it starts out pending"""
        return crud.create(db=db, obj_in=record_in, submitted_by=current_user.id)

    @router.get("/", response_model=List[read_schema])
    def read_registrations(
        db: Session = Depends(deps.get_db),
        skip: int = 0,
        limit: int = 100,
        current_user: User = Depends(deps.get_current_active_user),
    ) -> Any:
        """Registrars and admins get the pending queue; everyone else their own submissions"""
        if deps.is_reviewer(current_user):
            return crud.get_pending(db, skip=skip, limit=limit)
        return crud.get_by_submitter(db, user_id=current_user.id, skip=skip, limit=limit)

    @router.get("/application/{application_id}", response_model=read_schema)
    def read_registration_by_application_id(
        *,
        db: Session = Depends(deps.get_db),
        application_id: str,
        current_user: User = Depends(deps.get_current_active_user),
    ) -> Any:
        """Track a registration by its application ID"""
        return get_visible_record(db, application_id, current_user, by_application=True)

    @router.get("/{record_id}", response_model=read_schema)
    def read_registration(
        *,
        db: Session = Depends(deps.get_db),
        record_id: int,
        current_user: User = Depends(deps.get_current_active_user),
    ) -> Any:
        """Get registration by ID"""
        return get_visible_record(db, record_id, current_user)

    @router.put("/{record_id}/status", response_model=read_schema)
    def update_registration_status(
        *,
        db: Session = Depends(deps.get_db),
        record_id: int,
        status_in: StatusUpdate,
        current_user: User = Depends(
            deps.require_roles(*deps.REVIEWER_ROLES, action="update registration status")
        ),
    ) -> Any:
        """Approve or reject a pending registration (registrar/admin only)"""
        if status_in.status not in REVIEW_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid status")

        record = crud.get(db=db, id=record_id)
        if not record:
            raise HTTPException(status_code=404, detail=f"{label.capitalize()} registration not found")

        return crud.update_status(
            db,
            db_obj=record,
            status=status_in.status,
            reviewed_by=current_user.id,
            rejection_reason=status_in.rejection_reason,
        )

    return router
