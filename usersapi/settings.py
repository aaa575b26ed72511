from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from usersapi.errors import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="USERSAPI_",
        extra="ignore",
        populate_by_name=True,
    )

    # Unprefixed: read from DATABASE_URL.
    database_url: str = Field(validation_alias="DATABASE_URL")

    host: str = "127.0.0.1"
    port: int = 8080

    pool_size: int = 10
    pool_timeout: float = 0  # seconds; 0 fails immediately when the pool is exhausted
    pool_recycle: int = 1800
    worker_threads: int = 40

    log_level: str = "INFO"
    log_json: bool = False

    run_migrations: bool = True


@lru_cache
def get_settings() -> Settings:
    """Load settings from the environment (and ``.env``), once per process.

    Raises ``ConfigError`` when a required value is missing or malformed.
    """
    try:
        return Settings()
    except ValidationError as exc:
        missing = ", ".join(str(err["loc"][0]) for err in exc.errors())
        raise ConfigError(f"invalid or missing settings: {missing}") from exc
