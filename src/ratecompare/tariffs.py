"""Tariff parameter tables and YAML loading."""

import math
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "tariffs.yaml"


class TariffConfigError(ValueError):
    """Raised when a rate table definition is invalid."""


@dataclass(frozen=True)
class HourWindow:
    """A half-open window of hours [start, end). Wraps midnight when start > end."""

    start: int
    end: int

    def contains(self, hour: int) -> bool:
        if self.start <= self.end:
            return self.start <= hour < self.end
        # Overnight window (e.g., 23 to 7)
        return hour >= self.start or hour < self.end


@dataclass(frozen=True)
class FlatRate:
    """Schedule 7: tiered flat rate, tiering reset every calendar month."""

    tier1_limit_kwh: float = 600
    tier1_rate: float = 0.185  # $/kWh for first 600 kWh
    tier2_rate: float = 0.205  # $/kWh above 600 kWh


@dataclass(frozen=True)
class TimeOfUseRate:
    """Schedule 307: two-period time-of-use."""

    peak_rate_winter: float = 0.58  # Oct-Mar
    peak_rate_summer: float = 0.38  # Apr-Sep
    off_peak_rate: float = 0.15


@dataclass(frozen=True)
class TimeOfUseSuperRate:
    """Schedule 327: time-of-use with a super off-peak overnight period."""

    peak_rate_winter: float = 0.55
    peak_rate_summer: float = 0.32
    mid_peak_rate_winter: float = 0.17
    mid_peak_rate_summer: float = 0.17
    super_off_peak_rate: float = 0.12


@dataclass(frozen=True)
class RateTable:
    """Complete set of tariff parameters used to cost interval data."""

    name: str = "PSE Residential"
    effective_date: str = "2026-01"
    basic_charge: float = 7.49  # $/month, all schedules
    flat: FlatRate = field(default_factory=FlatRate)
    tou: TimeOfUseRate = field(default_factory=TimeOfUseRate)
    tou_super: TimeOfUseSuperRate = field(default_factory=TimeOfUseSuperRate)
    morning_peak: HourWindow = HourWindow(7, 10)
    evening_peak: HourWindow = HourWindow(17, 20)
    super_off_peak: HourWindow = HourWindow(23, 7)
    winter_months: frozenset[int] = frozenset({10, 11, 12, 1, 2, 3})

    def __post_init__(self) -> None:
        validate_rate_table(self)


def validate_rate_table(table: RateTable) -> None:
    """Check a rate table for obviously broken values."""
    rates = {
        "basic_charge": table.basic_charge,
        "flat.tier1_rate": table.flat.tier1_rate,
        "flat.tier2_rate": table.flat.tier2_rate,
        "flat.tier1_limit_kwh": table.flat.tier1_limit_kwh,
        "tou.peak_rate_winter": table.tou.peak_rate_winter,
        "tou.peak_rate_summer": table.tou.peak_rate_summer,
        "tou.off_peak_rate": table.tou.off_peak_rate,
        "tou_super.peak_rate_winter": table.tou_super.peak_rate_winter,
        "tou_super.peak_rate_summer": table.tou_super.peak_rate_summer,
        "tou_super.mid_peak_rate_winter": table.tou_super.mid_peak_rate_winter,
        "tou_super.mid_peak_rate_summer": table.tou_super.mid_peak_rate_summer,
        "tou_super.super_off_peak_rate": table.tou_super.super_off_peak_rate,
    }
    for name, value in rates.items():
        if not isinstance(value, (int, float)) or not math.isfinite(value):
            raise TariffConfigError(f"{name} must be a finite number (got {value!r})")
        if value < 0:
            raise TariffConfigError(f"{name} must not be negative (got {value})")

    if table.flat.tier2_rate < table.flat.tier1_rate:
        raise TariffConfigError("flat.tier2_rate must be >= flat.tier1_rate")

    for name in ("morning_peak", "evening_peak", "super_off_peak"):
        window = getattr(table, name)
        if not (0 <= window.start <= 23 and 0 <= window.end <= 24):
            raise TariffConfigError(f"{name} hours out of range: {window.start}-{window.end}")

    bad_months = [m for m in table.winter_months if not 1 <= m <= 12]
    if bad_months:
        raise TariffConfigError(f"winter_months out of range: {sorted(bad_months)}")


DEFAULT_RATE_TABLE = RateTable()


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TariffConfigError(f"{key} must be a mapping, got {value!r}")
    return value


def _parse_window(value: object, default: HourWindow) -> HourWindow:
    if value is None:
        return default
    if isinstance(value, dict):
        try:
            return HourWindow(start=int(value["start"]), end=int(value["end"]))
        except (KeyError, TypeError, ValueError) as e:
            raise TariffConfigError(f"Window needs integer start and end, got {value!r}") from e
    raise TariffConfigError(f"Window must be a mapping with start/end, got {value!r}")


def rate_table_from_dict(data: dict) -> RateTable:
    """Build a rate table from a parsed YAML/JSON mapping.

    Keys that are missing (or null) fall back to the default table's values.
    """
    default = DEFAULT_RATE_TABLE
    flat_data = _section(data, "flat")
    tou_data = _section(data, "tou")
    tou_super_data = _section(data, "tou_super")
    try:
        flat = replace(default.flat, **flat_data)
        tou = replace(default.tou, **tou_data)
        tou_super = replace(default.tou_super, **tou_super_data)
    except TypeError as e:
        raise TariffConfigError(f"Unknown rate key: {e}") from e

    windows = _section(data, "windows")
    winter_months = data.get("winter_months")
    try:
        basic_charge = float(data.get("basic_charge", default.basic_charge))
        months = (
            frozenset(int(m) for m in winter_months)
            if winter_months is not None
            else default.winter_months
        )
    except (TypeError, ValueError) as e:
        raise TariffConfigError(f"Invalid rate table value: {e}") from e

    return RateTable(
        name=data.get("name", default.name),
        effective_date=str(data.get("effective_date", default.effective_date)),
        basic_charge=basic_charge,
        flat=flat,
        tou=tou,
        tou_super=tou_super,
        morning_peak=_parse_window(windows.get("morning_peak"), default.morning_peak),
        evening_peak=_parse_window(windows.get("evening_peak"), default.evening_peak),
        super_off_peak=_parse_window(windows.get("super_off_peak"), default.super_off_peak),
        winter_months=months,
    )


def load_rate_table_from_yaml(config_path: Path | None = None) -> RateTable:
    """Load a rate table from a YAML config file."""
    path = config_path or DEFAULT_CONFIG_PATH
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise TariffConfigError(f"{path}: expected a mapping at the top level")
    return rate_table_from_dict(data.get("rate_table", data))


def rate_table_as_rows(table: RateTable) -> list[tuple[str, str, str, str]]:
    """Rows of (period, flat, tou, tou_super) describing a table, for display."""

    def money(value: float) -> str:
        return f"${value:.3f}".rstrip("0").rstrip(".") if value < 1 else f"${value:.2f}"

    return [
        (
            "Peak (winter / summer)",
            f"{money(table.flat.tier1_rate)} first {table.flat.tier1_limit_kwh:g} kWh",
            f"{money(table.tou.peak_rate_winter)} / {money(table.tou.peak_rate_summer)}",
            f"{money(table.tou_super.peak_rate_winter)} / {money(table.tou_super.peak_rate_summer)}",
        ),
        (
            "Off-peak",
            f"{money(table.flat.tier2_rate)} above {table.flat.tier1_limit_kwh:g} kWh",
            money(table.tou.off_peak_rate),
            f"{money(table.tou_super.mid_peak_rate_winter)} / {money(table.tou_super.mid_peak_rate_summer)}",
        ),
        (
            "Super off-peak",
            "-",
            "-",
            money(table.tou_super.super_off_peak_rate),
        ),
        (
            "Basic charge",
            f"${table.basic_charge:.2f}/mo",
            f"${table.basic_charge:.2f}/mo",
            f"${table.basic_charge:.2f}/mo",
        ),
    ]
