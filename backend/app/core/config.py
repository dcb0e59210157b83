# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_CLOSE_HOUR, DEFAULT_OPEN_HOUR, DEFAULT_SLOT_STEP_MINUTES


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)

_DEFAULT_IDENTITY_SECRET = SecretStr("dev-only-identity-secret-change-me")


class Settings(BaseSettings):
    environment: Literal["development", "test", "staging", "production"] = Field(
        default="development",
        description="Deployment environment name",
    )
    log_level: str = Field(default="INFO", description="Root log level")

    # Database
    database_url: str = Field(
        default="sqlite:///./studio_booking.db",
        description="SQLAlchemy URL for the bookings database",
    )
    database_echo: bool = False

    # External identity provider (JWT access tokens)
    identity_jwt_secret: SecretStr = Field(
        default=_DEFAULT_IDENTITY_SECRET,
        description="Shared secret used by the identity provider to sign access tokens",
    )
    identity_jwt_algorithm: str = "HS256"
    identity_jwt_audience: Optional[str] = Field(
        default="authenticated",
        description="Expected 'aud' claim; leave empty to skip the audience check",
    )

    # Studio booking hours
    studio_open_hour: int = Field(default=DEFAULT_OPEN_HOUR, ge=0, le=23)
    studio_close_hour: int = Field(default=DEFAULT_CLOSE_HOUR, ge=0, le=23)
    slot_step_minutes: int = Field(default=DEFAULT_SLOT_STEP_MINUTES, gt=0, le=240)

    # CORS - comma separated; use the allowed_origins property instead
    allowed_origins_raw: str = Field(default="", alias="allowed_origins")

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("identity_jwt_audience", mode="before")
    @classmethod
    def _blank_audience_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _validate_studio_hours(self) -> "Settings":
        if self.studio_open_hour >= self.studio_close_hour:
            raise ValueError("studio_open_hour must be before studio_close_hour")
        span_minutes = (self.studio_close_hour - self.studio_open_hour) * 60
        if span_minutes % self.slot_step_minutes != 0:
            raise ValueError("slot_step_minutes must divide the opening hours evenly")
        return self

    @model_validator(mode="after")
    def _require_identity_secret_in_production(self) -> "Settings":
        if (
            self.environment == "production"
            and self.identity_jwt_secret.get_secret_value()
            == _DEFAULT_IDENTITY_SECRET.get_secret_value()
        ):
            raise ValueError("IDENTITY_JWT_SECRET must be set in production")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins_raw.split(",") if origin.strip()]


settings = Settings()
logger.info(
    "[CONFIG] environment=%s database=%s hours=%02d:00-%02d:00 step=%smin",
    settings.environment,
    "sqlite" if settings.is_sqlite else "postgresql",
    settings.studio_open_hour,
    settings.studio_close_hour,
    settings.slot_step_minutes,
)
