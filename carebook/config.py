from pydantic_settings import BaseSettings, SettingsConfigDict
import os


class Settings(BaseSettings):
    """Application configuration settings."""

    # Application
    APP_NAME: str = "CareBook"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"

    # Clinic
    CLINIC_TIMEZONE: str = "America/New_York"
    BOOKING_HORIZON_DAYS: int = 30
    SEED_REVIEWS: bool = True

    # Session
    # Placeholder credential, not a security control
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin"
    AUTH_LATENCY_SECONDS: float = 1.0
    SESSION_FILE: str = ""  # empty keeps the snapshot in memory

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def validate_admin_config(self) -> bool:
        """Validate admin credential configuration."""
        if not self.ADMIN_USERNAME.strip() or not self.ADMIN_PASSWORD:
            raise ValueError("ADMIN_USERNAME and ADMIN_PASSWORD must not be empty")
        return True


settings = Settings()

if settings.LOG_FILE:
    os.makedirs(os.path.dirname(settings.LOG_FILE) or ".", exist_ok=True)
