from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Global application-level configuration.

    This class is the single source of truth for:
    - environment selection
    - logging behavior
    - session defaults (algorithm, order, dataset, pacing)
    - dataset bounds
    """

    model_config = SettingsConfigDict(
        env_prefix="SORTVIZ_",
        env_file=".env",
        extra="ignore",
    )

    # ---- Environment -------------------------------------------------

    env: Literal["local", "staging", "prod"] = "local"

    # ---- Logging -----------------------------------------------------

    log_level: str = "INFO"

    # ---- Session defaults --------------------------------------------

    default_algorithm: str = "bubble"
    default_order: Literal["ascending", "descending"] = "ascending"
    default_pattern: Literal["random", "reversed", "nearly-sorted", "few-unique"] = "random"
    default_size: int = Field(default=50, ge=2)

    default_pacing_ms: int = Field(
        default=200,
        ge=0,
        description="Delay each instrumented primitive waits before resuming",
    )

    # Optional fixed seed for dataset generation (None = fresh entropy)
    default_seed: Optional[int] = Field(default=None)

    # ---- Dataset bounds ----------------------------------------------

    min_value: int = Field(default=1, ge=1)
    max_value: int = Field(default=500, ge=1)
    min_size: int = Field(default=2, ge=0)
    max_size: int = Field(default=100, ge=1)

    # ---- Event feed --------------------------------------------------

    event_feed_capacity: int = Field(
        default=5000,
        gt=0,
        description="Events retained in memory for polling renderers",
    )

    # Optional JSONL trace of every event (None = no trace)
    trace_path: Optional[Path] = Field(default=None)

    @model_validator(mode="after")
    def _validate_bounds(self) -> "AppSettings":
        if self.min_value > self.max_value:
            raise ValueError("min_value must be <= max_value")
        if self.min_size > self.max_size:
            raise ValueError("min_size must be <= max_size")
        if not self.min_size <= self.default_size <= self.max_size:
            raise ValueError("default_size must lie within [min_size, max_size]")
        return self


# Singleton settings object
settings = AppSettings()
