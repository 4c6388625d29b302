"""
Pledge ledger settings, loaded from PLEDGE_* environment variables
"""
from datetime import date
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Conversions before this date are refused rather than extrapolated
EARLIEST_SUPPORTED_DATE = date(1850, 1, 1)


class Settings(BaseSettings):
    """
    Settings loaded from the environment (PLEDGE_LEDGER_DB, ...)
    """
    # Ledger store (sqlite, read-only)
    LEDGER_DB: str = "ledger.db"

    # Families without a declared currency
    DEFAULT_CURRENCY: Literal["NIS", "USD", "GBP"] = "NIS"

    # Pledges fall due this many days before the next Rosh Hashana;
    # the shortest Hebrew year is 353 days
    DUE_DATE_LEAD_DAYS: int = Field(default=7, ge=0, lt=353)

    model_config = SettingsConfigDict(
        env_prefix="PLEDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance
    """
    return Settings()
