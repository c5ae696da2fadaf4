"""Ovulation window derivation.

The luteal phase is held at a fixed length (14 days by default) regardless
of total cycle length, so ovulation is counted back from the next period:

    ovulation_end   = next_period_start - luteal_phase_days
    ovulation_start = ovulation_end - (window_days - 1)

The follicular phase absorbs any variation from a 28-day cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from src.cycles.base import CycleParameters, DateWindow, DegenerateWindow, ensure_valid_for
from src.cycles.config_loader import CycleConfig, get_cycle_config

logger = logging.getLogger("cyclewise.cycles.ovulation")


@dataclass(frozen=True)
class OvulationWindow(DateWindow):
    """The ovulation window of one cycle (inclusive)."""

    @classmethod
    def for_cycle(
        cls, params: CycleParameters, config: CycleConfig | None = None
    ) -> "OvulationWindow":
        """Derive the ovulation window for ``params``.

        Raises:
            InvalidParameters: If ``params`` fall outside ``config``'s domains.
            DegenerateWindow:  If the window would start on or before the last
                               day of the period.
        """
        cfg = config or get_cycle_config()
        ensure_valid_for(params, cfg)
        ov = cfg.ovulation
        end = params.next_period_start - timedelta(days=ov.luteal_phase_days)
        start = end - timedelta(days=ov.window_days - 1)

        if start <= params.effective_period_end:
            raise DegenerateWindow(
                f"A {params.cycle_length}-day cycle with a period ending "
                f"{params.effective_period_end} leaves no room for ovulation "
                f"(window would start {start})"
            )

        logger.debug("Ovulation window for cycle %s: %s..%s", params.period_start, start, end)
        return cls(start=start, end=end)

    def fertile_window(self, lead_days: int) -> DateWindow:
        """Fertile window: ``lead_days`` before ovulation start through its end."""
        return DateWindow(self.start - timedelta(days=lead_days), self.end)


def ovulation_window(params: CycleParameters, config: CycleConfig | None = None) -> OvulationWindow:
    """Convenience wrapper around ``OvulationWindow.for_cycle``."""
    return OvulationWindow.for_cycle(params, config)


def fertile_window(params: CycleParameters, config: CycleConfig | None = None) -> DateWindow:
    """Fertile window of the cycle described by ``params``."""
    cfg = config or get_cycle_config()
    return OvulationWindow.for_cycle(params, cfg).fertile_window(
        cfg.fertility.fertile_window_lead_days
    )
