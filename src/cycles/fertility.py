"""Day-by-day fertility estimate.

The score follows one curve per cycle (values from cycle_config.yaml):

    menstruation        0                        very low
    follicular          linear 5 → 70            by score threshold
      last 2 days       80 (pre-ovulation boost) high
    ovulation           90, 95, 85               peak fertility
    luteal              5                        very low

so it never decreases from period start to the ovulation peak and never
increases afterwards.  This is an estimate for display, not a medical
assessment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from src.cycles.base import CycleParameters, CyclePhase
from src.cycles.config_loader import (
    BAND_PEAK,
    BAND_VERY_LOW,
    CycleConfig,
    get_cycle_config,
)
from src.cycles.ovulation import OvulationWindow
from src.cycles.phase_classifier import PhaseClassifier

logger = logging.getLogger("cyclewise.cycles.fertility")


@dataclass(frozen=True)
class FertilityEstimate:
    """Fertility estimate for one date.

    Attributes:
        date:  The date estimated.
        phase: Cycle phase of the date.
        score: 0–100 fertility score.
        band:  Qualitative band ('very low' … 'peak fertility').
        day:   1-based day within the cycle that contains the date.
    """

    date: date
    phase: CyclePhase
    score: int
    band: str
    day: int

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "day": self.day,
            "phase": self.phase.value,
            "score": self.score,
            "band": self.band,
        }


class FertilityEstimator:
    """Score fertility for dates against a ``CycleParameters`` record."""

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()
        self._classifier = PhaseClassifier(self._config)

    def estimate(self, day: date, params: CycleParameters) -> FertilityEstimate:
        """Estimate fertility on ``day``.

        Raises:
            OutOfRangeDate:   If ``day`` is beyond the classification horizon.
            DegenerateWindow: If the cycle has no room for ovulation.
        """
        fe = self._config.fertility
        cycle = self._classifier.cycle_for(day, params)
        phase, window = self._classifier.phase_window(day, params)

        if phase is CyclePhase.MENSTRUATION:
            score, band = fe.menstruation_score, BAND_VERY_LOW
        elif phase is CyclePhase.OVULATION:
            score, band = fe.ovulation_scores[(day - window.start).days], BAND_PEAK
        elif phase is CyclePhase.LUTEAL:
            score, band = fe.luteal_score, BAND_VERY_LOW
        else:
            score = self._follicular_score(day, window.start, window.days, cycle)
            band = fe.band_for_score(score)

        return FertilityEstimate(
            date=day, phase=phase, score=score, band=band, day=cycle.cycle_day(day)
        )

    def _follicular_score(
        self, day: date, follicular_start: date, follicular_days: int, cycle: CycleParameters
    ) -> int:
        fe = self._config.fertility
        ovulation_start = OvulationWindow.for_cycle(cycle, self._config).start
        if (ovulation_start - day).days <= fe.boost_days:
            return fe.boost_score
        if follicular_days <= 1:
            return fe.ramp_start
        position = (day - follicular_start).days / (follicular_days - 1)
        return round(fe.ramp_start + (fe.ramp_end - fe.ramp_start) * position)

    def cycle_curve(self, params: CycleParameters) -> list[FertilityEstimate]:
        """Estimates for every day of the current cycle, in date order."""
        curve = [self.estimate(day, params) for day in params.cycle_window.dates()]
        logger.debug(
            "Fertility curve for cycle %s: %d days, peak %d",
            params.period_start,
            len(curve),
            max(e.score for e in curve),
        )
        return curve

    def peak_date(self, params: CycleParameters) -> date:
        """Date of the highest score in the current cycle."""
        ov = OvulationWindow.for_cycle(params, self._config)
        return ov.dates()[self._config.fertility.peak_offset]


def estimate_fertility(
    day: date, params: CycleParameters, config: CycleConfig | None = None
) -> FertilityEstimate:
    """Estimate fertility on ``day``.  See ``FertilityEstimator.estimate``."""
    return FertilityEstimator(config).estimate(day, params)
