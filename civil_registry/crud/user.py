from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from civil_registry.core.security import get_password_hash, verify_password
from civil_registry.models.user import User, UserRole
from civil_registry.schemas.user import UserCreate
import logging

logger = logging.getLogger(__name__)

class CRUDUser:
    """
    CRUD operations for the User model.
    """
    def get(self, db: Session, id: int) -> Optional[User]:
        """
        Retrieve a user by their ID.
        """
        return db.query(User).filter(User.id == id).first()

    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        """
        Retrieve a user by their email address.
        """
        return db.query(User).filter(User.email == email.strip().lower()).first()

    def create(
        self, db: Session, *, obj_in: UserCreate, role: UserRole = UserRole.PUBLIC
    ) -> User:
        """
        Create a new user with the given role.
        """
        db_obj = User(
            email=obj_in.email,
            hashed_password=get_password_hash(obj_in.password),
            full_name=obj_in.full_name,
            role=UserRole(role).value,
            is_active=obj_in.is_active,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"User created with email: {db_obj.email} (role: {db_obj.role})")
        return db_obj

    def update(self, db: Session, *, db_obj: User, update_data: Dict[str, Any]) -> User:
        """
        Update an existing user.
        """
        for field, value in update_data.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"User updated with email: {db_obj.email}")
        return db_obj

    def set_role(self, db: Session, *, db_obj: User, role: UserRole) -> User:
        """
        Change a user's role.
        """
        previous = db_obj.role
        user = self.update(db, db_obj=db_obj, update_data={"role": UserRole(role).value})
        logger.info(f"Role for user {user.id} changed from {previous} to {user.role}")
        return user

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        """
        Authenticate a user by email and password.
        Returns the user object if successful, otherwise None.
        """
        user = self.get_by_email(db, email=email)

        if not user:
            logger.warning(f"Authentication failed for email '{email}': User not found.")
            return None

        if not verify_password(password, getattr(user, "hashed_password", "")):
            logger.warning(f"Authentication failed for email '{email}': Incorrect password.")
            return None

        logger.info(f"Authentication successful for user: {user.email}")
        return user

    def is_active(self, user: User) -> bool:
        return bool(user.is_active)

    def has_role(self, user: User, *roles: UserRole) -> bool:
        """
        Check whether the user holds one of the given roles.
        """
        return user.role in {UserRole(r).value for r in roles}

user = CRUDUser()
