from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from civil_registry.api import deps
from civil_registry.core import security
from civil_registry.crud.user import user as user_crud
from civil_registry.schemas.auth import LoginRequest, Token
from civil_registry.schemas.user import User, UserCreate

router = APIRouter()

@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(
    *,
    db: Session = Depends(deps.get_db),
    user_in: UserCreate,
) -> Any:
    """Create a public account"""
    if user_crud.get_by_email(db, email=user_in.email):
        raise HTTPException(
            status_code=400,
            detail="A user with this email already exists",
        )
    return user_crud.create(db, obj_in=user_in)

@router.post("/login", response_model=Token)
def login(
    *,
    db: Session = Depends(deps.get_db),
    credentials: LoginRequest,
) -> Any:
    """Exchange email and password for an access token"""
    user = user_crud.authenticate(db, email=credentials.email, password=credentials.password)
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect email or password")
    if not user_crud.is_active(user):
        raise HTTPException(status_code=400, detail="Inactive user")
    return {"access_token": security.create_access_token(user.id), "token_type": "bearer"}
