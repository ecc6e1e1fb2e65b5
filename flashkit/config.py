"""Application settings using Pydantic."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property, lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from flashkit.exceptions import ConfigurationError
from flashkit.services.tokens import (
    DEFAULT_MAX_AGE,
    FLASH_COOKIE_NAME,
    TokenCodec,
    token_budget,
)

FLASH_SESSION_KEY = "_flash"


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = Field(default="Flashkit")
    env: str = Field(default="dev")
    debug: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    # Signs both the session cookie and the flash cookie tokens
    secret_key_base: str = Field(min_length=1)
    flash_signing_salt: str = Field(default="flash_cookie")
    flash_cookie_max_age: int = Field(default=DEFAULT_MAX_AGE, ge=1)

    session_cookie: str = Field(default="_app")
    session_max_age: int = Field(default=24 * 60 * 60)
    https_only: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FLASHKIT_",
        extra="ignore",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@dataclass(frozen=True)
class FlashConfig:
    """Flash wiring handed to the middleware and, through the scope, to fetch.

    ``signing_salt=None`` turns the cookie-token read path off.
    """

    secret_key_base: str
    signing_salt: str | None = None
    session_key: str = FLASH_SESSION_KEY
    cookie_name: str = FLASH_COOKIE_NAME
    cookie_max_age: int = DEFAULT_MAX_AGE

    def __post_init__(self) -> None:
        if not self.secret_key_base:
            raise ConfigurationError("secret_key_base must not be empty")
        if self.signing_salt is not None and not self.signing_salt:
            raise ConfigurationError("flash signing salt must not be empty")

    @classmethod
    def from_settings(cls, settings: Settings) -> FlashConfig:
        return cls(
            secret_key_base=settings.secret_key_base,
            signing_salt=settings.flash_signing_salt,
            cookie_max_age=settings.flash_cookie_max_age,
        )

    @cached_property
    def codec(self) -> TokenCodec | None:
        if self.signing_salt is None:
            return None
        return TokenCodec(
            self.secret_key_base,
            self.signing_salt,
            max_age=self.cookie_max_age,
            max_size=token_budget(self.cookie_name),
        )

    def require_codec(self) -> TokenCodec:
        """Codec for writers; a missing salt is a configuration error."""
        if self.codec is None:
            raise ConfigurationError("flash signing salt is not configured")
        return self.codec
