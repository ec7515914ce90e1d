# civil_registry/core/config.py

from pydantic_settings import BaseSettings
from typing import List

GHANA_REGIONS = [
    "Greater Accra",
    "Ashanti",
    "Western",
    "Western North",
    "Central",
    "Eastern",
    "Volta",
    "Oti",
    "Northern",
    "Savannah",
    "North East",
    "Upper East",
    "Upper West",
    "Bono",
    "Bono East",
    "Ahafo",
]

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str
    
    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    
    # API
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Civil Registry API"
    REGISTRATION_OFFICE: str = "Ghana Births and Deaths Registry"
    
    # Admin
    FIRST_SUPERUSER_EMAIL: str
    FIRST_SUPERUSER_PASSWORD: str

    # Statistics
    # 0 = Monday ... 6 = Sunday
    FIRST_WEEKDAY: int = 6
    REGIONS: List[str] = GHANA_REGIONS

    # Uploads
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024

    LOG_LEVEL: str = "INFO"
    
    class Config:
        env_file = ".env"
        
settings = Settings()
