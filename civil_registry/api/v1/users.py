from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from civil_registry.api import deps
from civil_registry.crud.user import user as user_crud
from civil_registry.models.user import User, UserRole
from civil_registry.schemas.user import VALID_ROLES, RoleUpdate, User as UserSchema

router = APIRouter()

@router.get("/me", response_model=UserSchema)
def read_user_me(
    current_user: User = Depends(deps.get_current_active_user),
) -> Any:
    """Get current user"""
    return current_user

@router.put("/{user_id}/role", response_model=UserSchema)
def update_user_role(
    *,
    db: Session = Depends(deps.get_db),
    user_id: int,
    role_in: RoleUpdate,
    current_user: User = Depends(
        deps.require_roles(UserRole.ADMIN, action="update user roles")
    ),
) -> Any:
    """Change a user's role (admin only)"""
    if role_in.role not in VALID_ROLES:
        raise HTTPException(status_code=400, detail="Invalid role")

    user = user_crud.get(db, id=user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user_crud.set_role(db, db_obj=user, role=UserRole(role_in.role))
