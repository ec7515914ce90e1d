from pydantic import BaseModel, validator
from typing import Optional
from datetime import datetime

VALID_ROLES = ['public', 'health_worker', 'registrar', 'admin']

class UserBase(BaseModel):
    email: str
    full_name: Optional[str] = None

    @validator('email')
    def validate_email(cls, v):
        v = v.strip().lower()
        if '@' not in v or v.startswith('@') or v.endswith('@'):
            raise ValueError('Invalid email address')
        return v

class UserCreate(UserBase):
    password: str
    is_active: bool = True

    @validator('password')
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError('Password must be at least 8 characters long')
        return v

class RoleUpdate(BaseModel):
    role: str

class User(UserBase):
    id: int
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
