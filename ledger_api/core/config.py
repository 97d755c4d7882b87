# ledger_api/core/config.py

from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (where .env should be located)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra="ignore"
    )

    # App Configuration
    APP_NAME: str = "Finance Ledger API"
    DEBUG: bool = False
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Database Configuration
    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR / 'ledger.db'}"

    # JWT / Security Configuration
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080
    SESSION_COOKIE_NAME: str = "ledger_session"
    COOKIE_SECURE: bool = False

    # New accounts are administrators in this deployment
    DEFAULT_USER_ROLE: str = "ADMIN"

    # CORS Configuration
    FRONTEND_URL: str = "http://localhost:3000"

    # Reports
    REPORT_LOCALE: str = "es_ES"

    # Optional: Environment
    ENVIRONMENT: str = "development"

    @field_validator("DEFAULT_USER_ROLE")
    @classmethod
    def _check_role(cls, value: str) -> str:
        value = value.upper()
        if value not in ("USER", "ADMIN"):
            raise ValueError("DEFAULT_USER_ROLE must be USER or ADMIN")
        return value

    @property
    def is_sqlite(self) -> bool:
        """Check if we're running on SQLite (local development and tests)"""
        return self.DATABASE_URL.startswith("sqlite")

# Create a global settings instance
settings = Settings()
