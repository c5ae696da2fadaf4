"""Forecast upcoming cycles by repeated offset of the cycle length."""

from __future__ import annotations

import logging

from src.cycles.base import CycleForecastEntry, CycleParameters, InvalidParameters
from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.ovulation import OvulationWindow

logger = logging.getLogger("cyclewise.cycles.forecaster")


class CycleForecaster:
    """Produce sequential ``CycleForecastEntry`` records.

    Entry ``i`` starts exactly ``i * cycle_length`` days after the current
    period start; there is no accumulated drift.  Only entry 0 honours an
    explicit period end.

    Usage::

        entries = CycleForecaster().forecast(params, count=3)
        entries[1].period_start   # params.next_period_start
    """

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    def forecast(self, params: CycleParameters, count: int | None = None) -> list[CycleForecastEntry]:
        """Forecast ``count`` cycles starting with the current one.

        Args:
            params: Current cycle parameters.
            count:  Number of cycles (defaults to ``forecast.default_cycles``).

        Raises:
            InvalidParameters: If ``count`` is outside ``1..forecast.max_cycles``.
            DegenerateWindow:  If the cycle has no room for ovulation.
        """
        fc = self._config.forecast
        if count is None:
            count = fc.default_cycles
        if isinstance(count, bool) or not isinstance(count, int) or not (1 <= count <= fc.max_cycles):
            raise InvalidParameters(f"count must be between 1 and {fc.max_cycles}, got {count!r}")

        lead = self._config.fertility.fertile_window_lead_days
        entries: list[CycleForecastEntry] = []
        for i in range(count):
            cycle = params.shifted(i)
            ov = OvulationWindow.for_cycle(cycle, self._config)
            fertile = ov.fertile_window(lead)
            entries.append(
                CycleForecastEntry(
                    index=i,
                    period_start=cycle.period_start,
                    period_end=cycle.effective_period_end,
                    ovulation_start=ov.start,
                    ovulation_end=ov.end,
                    fertility_window_start=fertile.start,
                    fertility_window_end=fertile.end,
                )
            )

        logger.debug(
            "Forecast %d cycles from %s (cycle_length=%d)",
            count,
            params.period_start,
            params.cycle_length,
        )
        return entries


def forecast_cycles(
    params: CycleParameters, count: int | None = None, config: CycleConfig | None = None
) -> list[CycleForecastEntry]:
    """Forecast ``count`` cycles.  See ``CycleForecaster.forecast``."""
    return CycleForecaster(config).forecast(params, count)
