"""Load, validate, and hot-reload the Cyclewise engine configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_cycle_config()`` to re-read from
disk after an update, no restart required.

Usage::

    from src.cycles.config_loader import get_cycle_config

    config = get_cycle_config()
    config.cycle_length.contains(28)           # True
    config.fertility.band_for_score(40)        # 'medium'
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("cyclewise.cycles.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"

BAND_VERY_LOW = "very low"
BAND_LOW = "low"
BAND_MEDIUM = "medium"
BAND_HIGH = "high"
BAND_PEAK = "peak fertility"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class DayRange:
    """Inclusive integer domain for a length parameter (in days)."""

    min_days: int
    max_days: int

    def contains(self, value: int) -> bool:
        return self.min_days <= value <= self.max_days

    def __str__(self) -> str:
        return f"{self.min_days}-{self.max_days}"


@dataclass
class OvulationConfig:
    """Ovulation window geometry."""

    luteal_phase_days: int = 14
    window_days: int = 3


@dataclass
class FertilityConfig:
    """Fertility score curve.

    Attributes:
        fertile_window_lead_days: Days before ovulation start that open the
                                  fertile window.
        menstruation_score:       Score for every menstruation day.
        ramp_start:               Follicular ramp score on its first day.
        ramp_end:                 Follicular ramp score on its last day.
        boost_days:               Days before ovulation start that get the
                                  pre-ovulation boost.
        boost_score:              Score for boosted days.
        ovulation_scores:         One score per ovulation window day.
        luteal_score:             Score for every luteal day.
        high_threshold:           Ramp score at or above this is 'high'.
        medium_threshold:         Ramp score at or above this is 'medium'.
        low_threshold:            Ramp score at or above this is 'low'.
    """

    fertile_window_lead_days: int = 5
    menstruation_score: int = 0
    ramp_start: int = 5
    ramp_end: int = 70
    boost_days: int = 2
    boost_score: int = 80
    ovulation_scores: list[int] = field(default_factory=lambda: [90, 95, 85])
    luteal_score: int = 5
    high_threshold: int = 80
    medium_threshold: int = 35
    low_threshold: int = 10

    @property
    def peak_offset(self) -> int:
        """Offset of the peak day from ovulation start."""
        return self.ovulation_scores.index(max(self.ovulation_scores))

    def band_for_score(self, score: int) -> str:
        if score >= self.high_threshold:
            return BAND_HIGH
        if score >= self.medium_threshold:
            return BAND_MEDIUM
        if score >= self.low_threshold:
            return BAND_LOW
        return BAND_VERY_LOW


@dataclass
class ForecastConfig:
    """Forecast sizing."""

    default_cycles: int = 3
    max_cycles: int = 24


@dataclass
class FlowConfig:
    """Flow intensity display bands (strictly-greater-than thresholds)."""

    heavy: int = 12
    medium: int = 8
    light: int = 4
    spotting: int = 0

    def band(self, intensity: int) -> str:
        if intensity > self.heavy:
            return "Heavy"
        if intensity > self.medium:
            return "Medium"
        if intensity > self.light:
            return "Light"
        if intensity > self.spotting:
            return "Spotting"
        return "None"


@dataclass
class CycleConfig:
    """Complete, validated engine configuration.

    This is the single in-memory representation of cycle_config.yaml.
    Every engine component reads from this object.

    Attributes:
        version:        Config schema version string.
        period_length:  Allowed period length domain.
        cycle_length:   Allowed cycle length domain.
        ovulation:      Ovulation window geometry.
        fertility:      Fertility score curve and bands.
        forecast:       Forecast sizing.
        horizon_cycles: How many cycles away from the current one a date
                        may be classified.
        flow:           Flow intensity bands.
        source:         File the config was loaded from.
    """

    version: str
    period_length: DayRange
    cycle_length: DayRange
    ovulation: OvulationConfig
    fertility: FertilityConfig
    forecast: ForecastConfig
    horizon_cycles: int
    flow: FlowConfig
    source: Path | None = None
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Applies defaults for optional fields and collects every problem before
    raising, so one failed load reports all of them.

    Args:
        raw: Parsed YAML dict.

    Returns:
        Validated CycleConfig instance.

    Raises:
        ConfigValidationError: If any field is missing or invalid.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, default: int, where: str) -> int:
        value = section.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{where}.{key} must be an integer, got {value!r}")
            return default
        return value

    def _section(d: Any, key: str) -> dict:
        value = (d or {}).get(key, {}) if isinstance(d, dict) else {}
        if not isinstance(value, dict):
            errors.append(f"'{key}' must be a mapping")
            return {}
        return value

    version = str(raw.get("version", "1.0"))

    # ── Parameter domains ──
    params_raw = _section(raw, "cycle_parameters")
    domains: dict[str, DayRange] = {}
    for name, (lo, hi) in {"period_length": (2, 10), "cycle_length": (20, 36)}.items():
        sec = _section(params_raw, name)
        where = f"cycle_parameters.{name}"
        rng = DayRange(
            min_days=_int(sec, "min_days", lo, where),
            max_days=_int(sec, "max_days", hi, where),
        )
        if rng.min_days < 1 or rng.min_days > rng.max_days:
            errors.append(f"{where} range {rng} is empty or non-positive")
        domains[name] = rng

    # ── Ovulation ──
    ov_raw = _section(raw, "ovulation")
    ovulation = OvulationConfig(
        luteal_phase_days=_int(ov_raw, "luteal_phase_days", 14, "ovulation"),
        window_days=_int(ov_raw, "window_days", 3, "ovulation"),
    )
    if ovulation.luteal_phase_days < 1:
        errors.append("ovulation.luteal_phase_days must be at least 1")
    if ovulation.window_days < 1:
        errors.append("ovulation.window_days must be at least 1")

    # ── Fertility curve ──
    fe_raw = _section(raw, "fertility")
    ramp_raw = _section(fe_raw, "follicular_ramp")
    boost_raw = _section(fe_raw, "pre_ovulation_boost")
    bands_raw = _section(fe_raw, "bands")
    ov_scores_raw = fe_raw.get("ovulation_scores", [90, 95, 85])
    ov_scores: list[int] = []
    if not isinstance(ov_scores_raw, list) or not ov_scores_raw:
        errors.append("fertility.ovulation_scores must be a non-empty list")
    else:
        for s in ov_scores_raw:
            if isinstance(s, bool) or not isinstance(s, int):
                errors.append(f"fertility.ovulation_scores entry {s!r} is not an integer")
            else:
                ov_scores.append(s)
    fertility = FertilityConfig(
        fertile_window_lead_days=_int(fe_raw, "fertile_window_lead_days", 5, "fertility"),
        menstruation_score=_int(fe_raw, "menstruation_score", 0, "fertility"),
        ramp_start=_int(ramp_raw, "start", 5, "fertility.follicular_ramp"),
        ramp_end=_int(ramp_raw, "end", 70, "fertility.follicular_ramp"),
        boost_days=_int(boost_raw, "days", 2, "fertility.pre_ovulation_boost"),
        boost_score=_int(boost_raw, "score", 80, "fertility.pre_ovulation_boost"),
        ovulation_scores=ov_scores or [90, 95, 85],
        luteal_score=_int(fe_raw, "luteal_score", 5, "fertility"),
        high_threshold=_int(bands_raw, "high", 80, "fertility.bands"),
        medium_threshold=_int(bands_raw, "medium", 35, "fertility.bands"),
        low_threshold=_int(bands_raw, "low", 10, "fertility.bands"),
    )
    if ov_scores and len(ov_scores) != ovulation.window_days:
        errors.append(
            f"fertility.ovulation_scores has {len(ov_scores)} entries, "
            f"expected one per ovulation day ({ovulation.window_days})"
        )
    all_scores = [
        fertility.menstruation_score,
        fertility.ramp_start,
        fertility.ramp_end,
        fertility.boost_score,
        fertility.luteal_score,
        *fertility.ovulation_scores,
    ]
    if any(not (0 <= s <= 100) for s in all_scores):
        errors.append("fertility scores must all be within [0, 100]")

    # The curve must climb to a single peak on an ovulation day
    rising = [
        fertility.menstruation_score,
        fertility.ramp_start,
        fertility.ramp_end,
        fertility.boost_score,
        *fertility.ovulation_scores[: fertility.peak_offset + 1],
    ]
    falling = [*fertility.ovulation_scores[fertility.peak_offset:], fertility.luteal_score]
    if any(a > b for a, b in zip(rising, rising[1:])):
        errors.append("fertility curve must be non-decreasing up to the ovulation peak")
    if any(a < b for a, b in zip(falling, falling[1:])):
        errors.append("fertility curve must be non-increasing after the ovulation peak")
    if not (fertility.low_threshold <= fertility.medium_threshold <= fertility.high_threshold):
        errors.append("fertility.bands must satisfy low <= medium <= high")
    if fertility.boost_days < 0 or fertility.fertile_window_lead_days < 0:
        errors.append("fertility day counts must not be negative")

    # ── Forecast ──
    fc_raw = _section(raw, "forecast")
    forecast = ForecastConfig(
        default_cycles=_int(fc_raw, "default_cycles", 3, "forecast"),
        max_cycles=_int(fc_raw, "max_cycles", 24, "forecast"),
    )
    if not (1 <= forecast.default_cycles <= forecast.max_cycles):
        errors.append("forecast.default_cycles must be between 1 and forecast.max_cycles")

    # ── Classification horizon ──
    cl_raw = _section(raw, "classification")
    horizon_cycles = _int(cl_raw, "horizon_cycles", 2, "classification")
    if horizon_cycles < 0:
        errors.append("classification.horizon_cycles must not be negative")

    # ── Flow bands ──
    fl_bands = _section(_section(raw, "flow"), "bands")
    flow = FlowConfig(
        heavy=_int(fl_bands, "heavy", 12, "flow.bands"),
        medium=_int(fl_bands, "medium", 8, "flow.bands"),
        light=_int(fl_bands, "light", 4, "flow.bands"),
        spotting=_int(fl_bands, "spotting", 0, "flow.bands"),
    )
    if not (flow.spotting <= flow.light <= flow.medium <= flow.heavy):
        errors.append("flow.bands must satisfy spotting <= light <= medium <= heavy")

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CycleConfig(
        version=version,
        period_length=domains["period_length"],
        cycle_length=domains["cycle_length"],
        ovulation=ovulation,
        fertility=fertility,
        forecast=forecast,
        horizon_cycles=horizon_cycles,
        flow=flow,
        _raw=raw,
    )


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the cycle config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.

    Returns:
        Validated CycleConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    config.source = target
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Return the global CycleConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_cycle_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Reload the cycle config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is
    re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_cycle_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info(
        "Reloaded cycle config: %s → %s",
        old_version,
        new_config.version,
    )
    return new_config
