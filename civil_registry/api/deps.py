from typing import Callable
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from civil_registry.core.config import settings
from civil_registry.core.database import get_db
from civil_registry.core.exceptions import AuthorizationError
from civil_registry.crud.user import user as user_crud
from civil_registry.models.user import User, UserRole
from civil_registry.schemas.auth import TokenPayload

security_scheme = HTTPBearer()

REVIEWER_ROLES = (UserRole.REGISTRAR, UserRole.ADMIN)
SUBMITTER_ROLES = (UserRole.PUBLIC, UserRole.HEALTH_WORKER, UserRole.ADMIN)
BULK_UPLOAD_ROLES = (UserRole.HEALTH_WORKER, UserRole.ADMIN)

def get_current_user(
    db: Session = Depends(get_db),
    token: HTTPAuthorizationCredentials = Depends(security_scheme)
) -> User:
    try:
        payload = jwt.decode(
            token.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Could not validate credentials",
        )

    user = user_crud.get(db, id=token_data.sub)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    if not user_crud.is_active(current_user):
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user

def require_roles(*roles: UserRole, action: str = "perform this action") -> Callable[..., User]:
    """Dependency factory admitting only users holding one of ``roles``."""
    def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if not user_crud.has_role(current_user, *roles):
            raise AuthorizationError(f"Insufficient permissions to {action}")
        return current_user
    return dependency

def is_reviewer(user: User) -> bool:
    return user_crud.has_role(user, *REVIEWER_ROLES)
