"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

from .enums import TRADING_WEEKDAYS, PeriodKind, Weekday
from .errors import ConfigError

if TYPE_CHECKING:
    from ..journal.heatmap import TimeBucketAggregator
    from ..journal.metrics import MetricsCalculator


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class HeatmapConfig(BaseModel):
    start_hour: int = 9
    end_hour: int = 17  # Inclusive
    weekdays: list[Weekday] = Field(default_factory=lambda: list(TRADING_WEEKDAYS))

    @field_validator("start_hour", "end_hour")
    @classmethod
    def _hour_in_day(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError(f"hour must be within 0-23, got {v}")
        return v

    @field_validator("weekdays")
    @classmethod
    def _weekdays_not_empty(cls, v: list[Weekday]) -> list[Weekday]:
        if not v:
            raise ValueError("at least one weekday is required")
        return v

    @model_validator(mode="after")
    def _ordered_hours(self) -> HeatmapConfig:
        if self.start_hour > self.end_hour:
            raise ValueError(
                f"start_hour ({self.start_hour}) is after end_hour ({self.end_hour})"
            )
        return self

    @property
    def hours(self) -> range:
        return range(self.start_hour, self.end_hour + 1)


class MetricsConfig(BaseModel):
    periods_per_year: int = Field(default=252, gt=0)  # Trading days/year for Sharpe


class ComparisonConfig(BaseModel):
    default_period: PeriodKind = PeriodKind.MONTH


class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class AnalyticsSettings(BaseSettings):
    """Top-level analytics settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    heatmap: HeatmapConfig = Field(default_factory=HeatmapConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    comparison: ComparisonConfig = Field(default_factory=ComparisonConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "JOURNAL_ANALYTICS_", "env_nested_delimiter": "__"}

    def build_calculator(self) -> MetricsCalculator:
        """Construct a MetricsCalculator from these settings."""
        from ..journal.metrics import MetricsCalculator

        return MetricsCalculator(periods_per_year=self.metrics.periods_per_year)

    def build_aggregator(self) -> TimeBucketAggregator:
        """Construct a TimeBucketAggregator from these settings."""
        from ..journal.heatmap import TimeBucketAggregator

        return TimeBucketAggregator(
            hours=self.heatmap.hours,
            weekdays=self.heatmap.weekdays,
        )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AnalyticsSettings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.

    Raises:
        ConfigError: If the file is unreadable or the values fail validation.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Malformed config file {path}: {exc}") from exc

    if overrides:
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

    try:
        return AnalyticsSettings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
