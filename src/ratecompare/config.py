"""Runtime configuration from the environment and analysis thresholds."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .analysis.change_points import ChangePointConfig
from .tariffs import DEFAULT_RATE_TABLE, RateTable, load_rate_table_from_yaml

load_dotenv()

DEFAULT_ANOMALY_THRESHOLD = 2.5


@dataclass(frozen=True)
class AnalysisConfig:
    """Thresholds for the daily-usage statistics."""

    min_days: int = 14  # Need at least 2 weeks
    anomaly_threshold: float = DEFAULT_ANOMALY_THRESHOLD
    min_weather_days: int = 30
    min_season_days: int = 7
    change_points: ChangePointConfig = field(default_factory=ChangePointConfig)


def get_tariffs_path() -> Path | None:
    """Path to a YAML rate table from RATECOMPARE_TARIFFS, if set."""
    value = os.environ.get("RATECOMPARE_TARIFFS")
    return Path(value) if value else None


def get_default_zip() -> str | None:
    return os.environ.get("RATECOMPARE_ZIP") or None


def get_anomaly_threshold() -> float:
    value = os.environ.get("RATECOMPARE_ANOMALY_THRESHOLD")
    if not value:
        return DEFAULT_ANOMALY_THRESHOLD
    try:
        return float(value)
    except ValueError:
        raise ValueError(
            f"RATECOMPARE_ANOMALY_THRESHOLD must be a number, got {value!r}"
        ) from None


def load_rate_table(path: Path | None = None) -> RateTable:
    """Rate table from an explicit path, then RATECOMPARE_TARIFFS, else the built-in default."""
    path = path or get_tariffs_path()
    if path is None:
        return DEFAULT_RATE_TABLE
    return load_rate_table_from_yaml(path)


def analysis_config_from_env() -> AnalysisConfig:
    return AnalysisConfig(anomaly_threshold=get_anomaly_threshold())
