"""Environment-sourced service configuration."""

from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USPS_URL = "https://apis-tem.usps.com"


class Settings(BaseSettings):
    """Service settings, read from the environment and an optional ``.env``.

    Field names map case-insensitively onto variable names, e.g.
    ``sugar_url`` is read from ``SUGAR_URL``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    sugar_url: str
    sugar_username: str
    sugar_password: str
    sugar_platform: str = "custom_api"

    usps_client_id: str
    usps_client_secret: str
    usps_url: str = DEFAULT_USPS_URL
    usps_cache_token: bool = False

    http_timeout: float = 10.0
    log_level: str = "INFO"
    log_format: str = "console"
    port: int = 3000

    @field_validator(
        "sugar_url",
        "sugar_username",
        "sugar_password",
        "usps_client_id",
        "usps_client_secret",
    )
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("sugar_url", "usps_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("sugar_platform")
    @classmethod
    def _default_platform(cls, value: str) -> str:
        return value or "custom_api"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process.

    Raises ``RuntimeError`` naming every variable that is unset, blank or
    unparseable, so the service fails at startup rather than on the first
    request.
    """
    try:
        return Settings()
    except ValidationError as exc:
        names = [str(error["loc"][0]).upper() for error in exc.errors() if error["loc"]]
        raise RuntimeError(
            "Missing or invalid environment variables: " + ", ".join(names)
        ) from exc
