"""Synthetic flow-intensity curve for period charts.

Decoration only: the curve is a symmetric ramp that peaks mid-period and is
not a physiological prediction.  For day ``d`` of a period of ``L`` days::

    d <= L/2  →  5 + 2d
    otherwise →  5 + 2(L - d + 1)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from src.cycles.base import CycleParameters
from src.cycles.config_loader import CycleConfig, get_cycle_config

logger = logging.getLogger("cyclewise.cycles.flow")


@dataclass(frozen=True)
class FlowPoint:
    """Flow intensity for one period day."""

    day: int
    intensity: int
    band: str
    date: date | None = None
    is_today: bool = False

    def to_dict(self) -> dict:
        d: dict = {"day": self.day, "intensity": self.intensity, "band": self.band}
        if self.date is not None:
            d["date"] = self.date.isoformat()
            d["is_today"] = self.is_today
        return d


def _intensity(day: int, period_length: int) -> int:
    if day <= period_length / 2:
        return 5 + 2 * day
    return 5 + 2 * (period_length - day + 1)


class FlowIntensityModel:
    """Build flow curves; display bands come from ``flow.bands`` config."""

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    def band(self, intensity: int) -> str:
        return self._config.flow.band(intensity)

    def curve(self, period_length: int) -> list[FlowPoint]:
        """Points for days ``1..period_length`` (empty when the length is not positive)."""
        points = []
        for day in range(1, period_length + 1):
            value = _intensity(day, period_length)
            points.append(FlowPoint(day=day, intensity=value, band=self.band(value)))
        return points

    def for_period(self, params: CycleParameters, as_of: date | None = None) -> list[FlowPoint]:
        """Dated curve over the effective period of ``params``."""
        today = as_of or date.today()
        logger.debug("Flow curve for period %s: %d days", params.period_start, params.period_days)
        return [
            FlowPoint(
                day=p.day,
                intensity=p.intensity,
                band=p.band,
                date=params.period_start + timedelta(days=p.day - 1),
                is_today=params.period_start + timedelta(days=p.day - 1) == today,
            )
            for p in self.curve(params.period_days)
        ]


def flow_intensity(period_length: int, config: CycleConfig | None = None) -> list[FlowPoint]:
    """Flow curve for a period of ``period_length`` days."""
    return FlowIntensityModel(config).curve(period_length)
