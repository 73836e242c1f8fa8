"""Runtime settings, read from the environment or a ``.env`` file.

Every variable is prefixed with ``STOCKLEDGER_``, e.g.
``STOCKLEDGER_DATA_DIR=/var/lib/stockledger``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # =========================================================================
    # Storage
    # =========================================================================
    DATA_DIR: Path = Field(
        default=Path(__file__).resolve().parents[2] / "data",
        description="Directory holding items.json and transactions.json",
    )

    # =========================================================================
    # Ledger
    # =========================================================================
    MAX_APPLY_ATTEMPTS: int = Field(
        default=5,
        ge=1,
        description="Compare-and-swap attempts before a movement fails with CONFLICT",
    )
    DEFAULT_PAGE_SIZE: int = Field(default=20, ge=1)
    MAX_PAGE_SIZE: int = Field(default=100, ge=1)

    # =========================================================================
    # Logging
    # =========================================================================
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=True)

    # =========================================================================
    # HTTP
    # =========================================================================
    HTTP_HOST: str = Field(default="127.0.0.1")
    HTTP_PORT: int = Field(default=8000)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STOCKLEDGER_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
