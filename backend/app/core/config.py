import logging
import os
import tomllib
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

PYPROJECT_PATH = Path(__file__).resolve().parents[3] / "pyproject.toml"

MIN_SECRET_LENGTH = 32


def _get_version() -> str:
    """MARKETPLACE_VERSION wins; otherwise the version declared in pyproject.toml."""
    if env_version := os.getenv("MARKETPLACE_VERSION"):
        return env_version

    if PYPROJECT_PATH.exists():
        with PYPROJECT_PATH.open("rb") as f:
            return tomllib.load(f).get("project", {}).get("version", "0.0.0-dev")

    return "0.0.0-dev"


APP_VERSION = _get_version()

INSECURE_SECRET_DEFAULTS = [
    "dev-secret-key-change-in-prod",
    "secret",
    "changeme",
]


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Vehicle Marketplace"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/marketplace.db"

    # JWT
    # Only accepted with DEBUG set; see validate_jwt_secret
    JWT_SECRET_KEY: str = "dev-secret-key-change-in-prod"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # Login lockout
    LOGIN_MAX_ATTEMPTS: int = 5
    LOGIN_LOCKOUT_SECONDS: int = 60

    # Pagination
    LISTING_DEFAULT_PAGE_SIZE: int = 10
    INQUIRY_DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 100

    # Creates admin@test.com / user@test.com on startup
    SEED_USERS_ON_STARTUP: bool = True

    # Comma-separated list of allowed origins
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got '{v}'")
        return level

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 10 or v > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 10 and 31")
        return v

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Refuse empty, short or well-known signing keys; DEBUG tolerates the dev default."""
        if not v or not v.strip():
            raise ValueError("JWT_SECRET_KEY must be set. Generate one with: openssl rand -base64 32")

        if v.lower() in INSECURE_SECRET_DEFAULTS:
            # Field order is not guaranteed here, so DEBUG comes from the environment
            if os.environ.get("DEBUG", "").lower() not in ("true", "1", "yes"):
                raise ValueError(
                    "JWT_SECRET_KEY is an insecure default value and DEBUG is off. "
                    "Generate one with: openssl rand -base64 32"
                )
            logger.warning("JWT_SECRET_KEY is the insecure development default; never deploy this")
        elif len(v) < MIN_SECRET_LENGTH:
            raise ValueError(f"JWT_SECRET_KEY must be at least {MIN_SECRET_LENGTH} characters long")

        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
