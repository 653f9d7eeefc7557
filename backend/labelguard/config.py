"""Engine Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a default; the engine works with no environment at all
    - Edit limits are non-negative; font-size multiplier overrides are positive
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - LABELGUARD_ env prefix so the engine can share a .env with its host
    - Limits are read once per batch (ValidationOptions.from_settings), never mid-batch
"""

from dataclasses import fields, replace
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from labelguard.core.domain_types import DEFAULT_MAX_DELTA, DEFAULT_MAX_EDITS
from labelguard.core.font_size import DEFAULT_FONT_SIZE_MULTIPLIERS, FontSizeMultipliers

_MULTIPLIER_NAMES = frozenset(f.name for f in fields(FontSizeMultipliers))


class Settings(BaseSettings):
    """Engine settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="LABELGUARD_", case_sensitive=False,
        extra="ignore",
    )

    # Edit enforcement
    edit_max_edits: int = DEFAULT_MAX_EDITS
    edit_max_delta: float = DEFAULT_MAX_DELTA

    # Font-size keywords, e.g. LABELGUARD_FONT_SIZE_MULTIPLIERS='{"larger": 1.25}'
    font_size_multipliers: dict[str, float] = {}

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("edit_max_edits", "edit_max_delta")
    @classmethod
    def check_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("edit limits must be >= 0")
        return v

    @field_validator("font_size_multipliers")
    @classmethod
    def check_multipliers(cls, v: dict[str, float]) -> dict[str, float]:
        normalized = {key.replace("-", "_").lower(): value for key, value in v.items()}
        unknown = set(normalized) - _MULTIPLIER_NAMES
        if unknown:
            raise ValueError(f"unknown font size multipliers: {sorted(unknown)}")
        if any(value <= 0 for value in normalized.values()):
            raise ValueError("font size multipliers must be > 0")
        return normalized

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    def multipliers(self) -> FontSizeMultipliers:
        """Default multipliers with the configured overrides applied."""
        if not self.font_size_multipliers:
            return DEFAULT_FONT_SIZE_MULTIPLIERS
        return replace(DEFAULT_FONT_SIZE_MULTIPLIERS, **self.font_size_multipliers)


@lru_cache
def get_settings() -> Settings:
    return Settings()
