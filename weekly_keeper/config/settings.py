"""
Configuration Management for WeeklyKeeper

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Policy choices that the engine supports in more than one variant
(week anchoring, settlement policy) are selected once, here, rather
than branched on at call sites.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from weekly_keeper.engine.dates import WeekAnchor
from weekly_keeper.models.expense import ShiftMode
from weekly_keeper.models.settlement import SettlementPolicy


DEFAULT_REMOTE_FILENAME = "weekly_keeper_data.json"


class RestSyncSettings(BaseSettings):
    """Same-origin REST backend (GET/POST /api/data)."""

    model_config = SettingsConfigDict(
        env_prefix="REST_SYNC_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=False,
        description="Sync the full state to the REST backend"
    )
    base_url: str = Field(
        default="http://localhost",
        description="Base URL of the server exposing /api/data"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout"
    )

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")


class WebDAVSettings(BaseSettings):
    """User-supplied WebDAV endpoint."""

    model_config = SettingsConfigDict(
        env_prefix="WEBDAV_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=False,
        description="Upload snapshots to the WebDAV endpoint"
    )
    url: str = Field(
        default="",
        description="WebDAV folder URL"
    )
    username: str = Field(default="")
    password: str = Field(default="")
    filename: str = Field(
        default=DEFAULT_REMOTE_FILENAME,
        min_length=1,
        description="Name of the snapshot file inside the folder"
    )
    require_https: bool = Field(
        default=False,
        description="Refuse plain http:// endpoints (secure-context rule)"
    )
    timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Per-request timeout"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    log_level: str = Field(
        default="INFO",
        description="Log level for structlog/stdlib logging"
    )

    # Local persistence
    data_file: Path = Field(
        default=Path("data") / DEFAULT_REMOTE_FILENAME,
        description="Path of the local JSON snapshot"
    )

    # Seeds for the initial state
    default_daily_subsidy: float = Field(
        default=28.0,
        ge=0,
        description="Daily meal subsidy used when nothing is persisted"
    )
    default_hourly_rate: float = Field(
        default=0.0,
        ge=0,
        description="Hourly rate used when nothing is persisted"
    )
    default_shift_mode: ShiftMode = Field(
        default=ShiftMode.DAY,
        description="Shift mode used when nothing is persisted"
    )

    # Policies
    week_anchor: WeekAnchor = Field(
        default=WeekAnchor.STABLE,
        description="Which week a Sunday belongs to"
    )
    settlement_policy: SettlementPolicy = Field(
        default=SettlementPolicy.POOLED,
        description="Subsidy entitlement and deduction policy"
    )

    # Sync
    sync_debounce_seconds: float = Field(
        default=3.0,
        ge=0,
        description="Quiet period before a remote upload"
    )

    # Sanity ceilings for user input
    max_expense_amount: float = Field(
        default=100000.0,
        gt=0,
        description="Largest single expense accepted"
    )
    max_daily_hours: float = Field(
        default=24.0,
        gt=0,
        le=24,
        description="Largest number of hours accepted for one day"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def rest_sync(self) -> RestSyncSettings:
        return RestSyncSettings()

    @property
    def webdav(self) -> WebDAVSettings:
        return WebDAVSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {section_name: is_valid} plus "<section>_error"
    entries for the sections that failed. Useful for startup checks.
    """
    results: dict[str, object] = {}
    settings = get_settings()

    for name in ("app", "rest_sync", "webdav"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results

