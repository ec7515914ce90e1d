from civil_registry.api.v1.registrations import make_registration_router
from civil_registry.crud.registration import death_registration as death_crud
from civil_registry.schemas.registration import DeathRegistration, DeathRegistrationCreate

router = make_registration_router(death_crud, DeathRegistrationCreate, DeathRegistration)
