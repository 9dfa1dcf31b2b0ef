"""
Core settings and environment variables for Madurai Clean.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Madurai Clean API"
    APP_VERSION: str = "3.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - Frontend URLs allowed to access this API
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173"

    # Relational store
    DATABASE_URL: str = "sqlite:///./madurai_clean.db"
    DB_ECHO: bool = False

    # Bearer credentials (signed JWT, 24h lifetime)
    JWT_SECRET: str = "super-secret-key-change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    BCRYPT_ROUNDS: int = 10

    # Email (Gmail SMTP). Leaving GMAIL_USER/GMAIL_PASS unset disables all email.
    GMAIL_USER: Optional[str] = None
    GMAIL_PASS: Optional[str] = None
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_TIMEOUT: float = 10.0
    EMAIL_FROM_NAME: str = "Madurai Clean 3.0"

    # Community engagement
    RSVP_POINTS: int = 10

    # Report lifecycle
    # - STRICT_STATUS_TRANSITIONS: only single forward steps are accepted
    # - ENFORCE_WARD_SCOPE: ward officers may only act on reports in their own ward
    STRICT_STATUS_TRANSITIONS: bool = True
    ENFORCE_WARD_SCOPE: bool = True

    # Bootstrap seed (wards, sample events, system admin)
    SEED_ON_STARTUP: bool = True
    ADMIN_EMAIL: str = "admin@maduraiclean.in"
    ADMIN_PASSWORD: str = "admin123"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
