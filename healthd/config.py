"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - With no environment set, healthd listens on 0.0.0.0:8080

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - HEALTHD_ prefix: avoids clashing with platform variables such as PORT
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTHD_", env_file=".env", case_sensitive=False,
    )

    # Listener
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=0, le=65535)

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    @property
    def listen_url(self) -> str:
        return f"http://{self.host}:{self.port}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
