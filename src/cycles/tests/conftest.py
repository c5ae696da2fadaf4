"""Shared fixtures for cycle engine tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
import yaml

from src.cycles.base import CycleParameters
from src.cycles.config_loader import (
    CycleConfig,
    _validate_and_build,
    load_cycle_config,
    reload_cycle_config,
)

BUNDLED_CONFIG = Path(__file__).parent.parent / "cycle_config.yaml"

# Canonical scenario: 5-day period in a 28-day cycle starting 2024-01-01
CANONICAL_START = date(2024, 1, 1)
CANONICAL_PERIOD = 5
CANONICAL_CYCLE = 28


def valid_combinations() -> list[tuple[int, int]]:
    """Every (period_length, cycle_length) pair that leaves room for ovulation.

    With a 14-day luteal phase and 3-day window, ovulation starts on cycle
    offset ``cycle_length - 16``, which must come after the period.
    """
    return [
        (period, cycle)
        for period in range(2, 11)
        for cycle in range(20, 37)
        if cycle >= period + 16
    ]


def degenerate_combinations() -> list[tuple[int, int]]:
    """Valid-domain pairs whose ovulation window would overlap the period."""
    return [
        (period, cycle)
        for period in range(2, 11)
        for cycle in range(20, 37)
        if period < cycle < period + 16
    ]


def raw_config() -> dict:
    """The bundled YAML as a plain dict, for building variant configs."""
    return yaml.safe_load(BUNDLED_CONFIG.read_text(encoding="utf-8"))


def build_config(**fertility_overrides) -> CycleConfig:
    raw = raw_config()
    raw["fertility"].update(fertility_overrides)
    return _validate_and_build(raw)


def build_domain_config(cycle_max_days: int) -> CycleConfig:
    """Bundled config with a different upper bound on cycle length."""
    raw = raw_config()
    raw["cycle_parameters"]["cycle_length"]["max_days"] = cycle_max_days
    return _validate_and_build(raw)


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the real cycle config for tests."""
    return load_cycle_config()


@pytest.fixture
def params() -> CycleParameters:
    return CycleParameters(
        period_start=CANONICAL_START,
        period_length=CANONICAL_PERIOD,
        cycle_length=CANONICAL_CYCLE,
    )


@pytest.fixture
def restore_config():
    """Put the bundled config back into the singleton after a reload test."""
    yield
    reload_cycle_config(BUNDLED_CONFIG)
