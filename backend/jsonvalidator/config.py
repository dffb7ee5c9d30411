"""Library configuration via environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Validator settings loaded from `JSONVALIDATOR_*` environment variables."""

    # Logging
    LOG_LEVEL: str = "info"
    DEBUG: bool = False

    # Final decode into the target model
    STRICT_DECODE: bool = True

    # Rule DSL
    MAX_COMPOSITE_DEPTH: int = 8

    model_config = {
        "env_prefix": "JSONVALIDATOR_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
