from fastapi import APIRouter
from civil_registry.api.v1 import auth, birth_registrations, death_registrations, stats, users, verify

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(birth_registrations.router, prefix="/birth-registrations", tags=["birth-registrations"])
api_router.include_router(death_registrations.router, prefix="/death-registrations", tags=["death-registrations"])
api_router.include_router(verify.router, prefix="/verify", tags=["verification"])
api_router.include_router(stats.router, prefix="/stats", tags=["statistics"])
