from typing import Any
from fastapi import Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session
from pydantic import ValidationError
import logging

from civil_registry.api import deps
from civil_registry.api.v1.registrations import make_registration_router
from civil_registry.core.config import settings
from civil_registry.core.exceptions import StoreQueryError
from civil_registry.crud.registration import birth_registration as birth_crud
from civil_registry.models.user import User
from civil_registry.schemas.registration import BirthRegistration, BirthRegistrationCreate
from civil_registry.utils.spreadsheet import parse_registration_workbook

logger = logging.getLogger(__name__)

router = make_registration_router(birth_crud, BirthRegistrationCreate, BirthRegistration)

@router.post("/upload-excel/")
async def upload_excel_file(
    *,
    db: Session = Depends(deps.get_db),
    file: UploadFile = File(...),
    current_user: User = Depends(
        deps.require_roles(*deps.BULK_UPLOAD_ROLES, action="bulk upload birth registrations")
    ),
    dry_run: bool = Query(False, description="Validate rows without saving"),
) -> Any:
    """
    Submit birth registrations in bulk from a hospital Excel register

    Parameters:
    - file: Excel file (.xlsx or .xls)
    - dry_run: If True, validates rows but doesn't create registrations
    """
    if not file.filename or not file.filename.endswith(('.xlsx', '.xls')):
        raise HTTPException(
            status_code=400,
            detail="File must be an Excel file (.xlsx or .xls)"
        )

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File size too large. Maximum allowed size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
        )

    logger.info(f"Processing Excel file: {file.filename} (User: {current_user.id})")

    try:
        rows = parse_registration_workbook(content)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    if not rows:
        raise HTTPException(
            status_code=400,
            detail="No registration rows found in the Excel file"
        )

    created_records = []
    validation_errors = []
    database_errors = []

    for parsed in rows:
        location = f"{parsed['sheet']} row {parsed['row']}"
        try:
            record_in = BirthRegistrationCreate(**parsed["data"])
        except ValidationError as ve:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in ve.errors()
            )
            validation_errors.append(f"{location}: {problems}")
            continue

        if dry_run:
            created_records.append({"row": location, "status": "valid"})
            continue

        try:
            record = birth_crud.create(db=db, obj_in=record_in, submitted_by=current_user.id)
        except StoreQueryError as se:
            database_errors.append(f"{location}: {se.message}")
            continue
        created_records.append({
            "row": location,
            "id": record.id,
            "application_id": record.application_id,
            "child_name": record.display_name,
        })

    success_count = len(created_records)
    error_count = len(validation_errors) + len(database_errors)

    if dry_run:
        message = f"Dry run completed. {success_count} registrations would be created, {error_count} errors found"
    else:
        message = f"Successfully created {success_count} registrations, {error_count} errors encountered"

    logger.info(f"Upload summary - Total: {len(rows)}, Success: {success_count}, Errors: {error_count}")

    return {
        "message": message,
        "dry_run": dry_run,
        "total_records": len(rows),
        "success_count": success_count,
        "error_count": error_count,
        "created_records": created_records,
        "errors": {
            "validation_errors": validation_errors,
            "database_errors": database_errors,
        },
    }
