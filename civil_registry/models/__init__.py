from civil_registry.models.registration import (
    BirthRegistration,
    DeathRegistration,
    RegistrationStatus,
)
from civil_registry.models.user import User, UserRole

__all__ = [
    "BirthRegistration",
    "DeathRegistration",
    "RegistrationStatus",
    "User",
    "UserRole",
]
