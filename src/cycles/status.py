"""Current-cycle snapshot for dashboards.

Combines phase, fertility, countdown and window membership for one
evaluation date so the presentation layer renders a single object instead
of recomputing cycle math itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum

from src.cycles.base import CycleParameters, CyclePhase
from src.cycles.config_loader import BAND_VERY_LOW, CycleConfig, get_cycle_config
from src.cycles.fertility import FertilityEstimate, FertilityEstimator
from src.cycles.ovulation import OvulationWindow
from src.cycles.phase_classifier import PhaseClassifier

logger = logging.getLogger("cyclewise.cycles.status")

PHASE_INFO: dict[CyclePhase, tuple[str, str]] = {
    CyclePhase.MENSTRUATION: (
        "Menstrual Phase",
        "The uterine lining is shedding. Rest and extra self-care help.",
    ),
    CyclePhase.FOLLICULAR: (
        "Follicular Phase",
        "Estrogen rises while ovarian follicles mature; energy often picks up.",
    ),
    CyclePhase.OVULATION: (
        "Ovulation",
        "An egg is released and can be fertilized for about a day.",
    ),
    CyclePhase.LUTEAL: (
        "Luteal Phase",
        "Progesterone rises to prepare for a possible pregnancy; PMS symptoms may appear.",
    ),
}


class CountdownKind(str, Enum):
    PERIOD = "period"            # days left in the active period, today included
    NEXT_PERIOD = "next_period"  # days until the next period starts


@dataclass(frozen=True)
class CycleStatus:
    """Snapshot of the cycle on one evaluation date.

    Attributes:
        as_of:             Evaluation date.
        cycle_day:         1-based day within the cycle.
        phase:             Phase of ``as_of``.
        phase_name:        Display name of the phase.
        phase_description: One-sentence description of the phase.
        fertility:         Fertility estimate for ``as_of``.
        countdown_kind:    What ``countdown_days`` counts down to.
        countdown_days:    Days remaining (see ``CountdownKind``).
        next_period_start: Start of the next period.
        in_fertile_window: True inside the fertile window.
        is_ovulation_day:  True on the last day of the ovulation window.
    """

    as_of: date
    cycle_day: int
    phase: CyclePhase
    phase_name: str
    phase_description: str
    fertility: FertilityEstimate
    countdown_kind: CountdownKind
    countdown_days: int
    next_period_start: date
    in_fertile_window: bool
    is_ovulation_day: bool

    def to_dict(self) -> dict:
        return {
            "as_of": self.as_of.isoformat(),
            "cycle_day": self.cycle_day,
            "phase": self.phase.value,
            "phase_name": self.phase_name,
            "phase_description": self.phase_description,
            "fertility": self.fertility.to_dict(),
            "countdown_kind": self.countdown_kind.value,
            "countdown_days": self.countdown_days,
            "next_period_start": self.next_period_start.isoformat(),
            "in_fertile_window": self.in_fertile_window,
            "is_ovulation_day": self.is_ovulation_day,
        }


def cycle_status(
    params: CycleParameters,
    as_of: date | None = None,
    config: CycleConfig | None = None,
) -> CycleStatus:
    """Build the dashboard snapshot for ``as_of`` (defaults to today).

    On the rollover day itself (``as_of == next_period_start``) the stored
    cycle is still current: the phase is its last luteal day and the
    countdown reaches 0.  Other dates are evaluated against the cycle that
    contains them.

    Raises:
        OutOfRangeDate:   If ``as_of`` is beyond the classification horizon.
        DegenerateWindow: If the cycle has no room for ovulation.
    """
    cfg = config or get_cycle_config()
    today = as_of or date.today()
    classifier = PhaseClassifier(cfg)

    phase = classifier.classify(today, params, as_of=today)
    rollover_day = today == params.next_period_start
    if rollover_day:
        cycle = params
    else:
        cycle = classifier.cycle_for(today, params)

    if today in cycle.period_window:
        kind = CountdownKind.PERIOD
        countdown = (cycle.effective_period_end - today).days + 1
    else:
        kind = CountdownKind.NEXT_PERIOD
        countdown = (cycle.next_period_start - today).days

    ov = OvulationWindow.for_cycle(cycle, cfg)
    fertile = ov.fertile_window(cfg.fertility.fertile_window_lead_days)

    if rollover_day:
        # Score the rollover day as the luteal day it is classified as
        fertility = FertilityEstimate(
            date=today,
            phase=phase,
            score=cfg.fertility.luteal_score,
            band=BAND_VERY_LOW,
            day=cycle.cycle_day(today),
        )
    else:
        fertility = FertilityEstimator(cfg).estimate(today, params)

    name, description = PHASE_INFO[phase]
    status = CycleStatus(
        as_of=today,
        cycle_day=cycle.cycle_day(today),
        phase=phase,
        phase_name=name,
        phase_description=description,
        fertility=fertility,
        countdown_kind=kind,
        countdown_days=countdown,
        next_period_start=cycle.next_period_start,
        in_fertile_window=today in fertile,
        is_ovulation_day=today == ov.end,
    )
    logger.debug("Cycle status %s: day %d, %s", today, status.cycle_day, phase.value)
    return status
