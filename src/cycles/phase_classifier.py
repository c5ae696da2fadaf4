"""Map calendar dates to menstrual cycle phases.

Each cycle ``[period_start, next_period_start)`` is partitioned into
contiguous phase intervals:

    menstruation : [period_start, effective_period_end]
    follicular   : [effective_period_end + 1, ovulation_start - 1]
    ovulation    : [ovulation_start, ovulation_end]
    luteal       : [ovulation_end + 1, next_period_start - 1]

The follicular interval is dropped when a short cycle leaves it empty.
Because the intervals are built end-to-start from the same boundaries there
is no date inside a cycle that matches none of them.

Dates in neighbouring cycles are classified against the projected cycle
that contains them, up to ``classification.horizon_cycles`` away.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from src.cycles.base import CycleParameters, CyclePhase, DateWindow, OutOfRangeDate
from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.ovulation import OvulationWindow

logger = logging.getLogger("cyclewise.cycles.phase_classifier")


class PhaseClassifier:
    """Classify dates against a ``CycleParameters`` record.

    Stateless apart from the config reference; every call recomputes the
    partition from the parameters it is given.

    Usage::

        classifier = PhaseClassifier()
        classifier.classify(date(2024, 1, 14), params)   # CyclePhase.OVULATION
    """

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    @property
    def config(self) -> CycleConfig:
        return self._config

    def partition(self, params: CycleParameters) -> list[tuple[CyclePhase, DateWindow]]:
        """Return the phase intervals of the cycle described by ``params``.

        Raises:
            DegenerateWindow: If the ovulation window overlaps the period.
        """
        ov = OvulationWindow.for_cycle(params, self._config)
        one = timedelta(days=1)

        phases = [(CyclePhase.MENSTRUATION, params.period_window)]
        follicular = DateWindow(params.effective_period_end + one, ov.start - one)
        if follicular.days > 0:
            phases.append((CyclePhase.FOLLICULAR, follicular))
        phases.append((CyclePhase.OVULATION, DateWindow(ov.start, ov.end)))
        phases.append((CyclePhase.LUTEAL, DateWindow(ov.end + one, params.next_period_start - one)))
        return phases

    def cycle_for(self, day: date, params: CycleParameters) -> CycleParameters:
        """Return the (possibly projected) cycle that contains ``day``.

        Raises:
            OutOfRangeDate: If ``day`` is more than ``horizon_cycles`` cycles
                            away from the current one.
        """
        index = params.cycle_index(day)
        if abs(index) > self._config.horizon_cycles:
            raise OutOfRangeDate(
                f"{day} is {abs(index)} cycles from the cycle starting "
                f"{params.period_start}; at most {self._config.horizon_cycles} "
                "are supported. Re-derive parameters from a more recent period."
            )
        return params.shifted(index)

    def classify(
        self, day: date, params: CycleParameters, as_of: date | None = None
    ) -> CyclePhase:
        """Classify one date.

        Args:
            day:    Date to classify.
            params: Current cycle parameters.
            as_of:  Evaluation date ("today").  When it equals both ``day``
                    and ``next_period_start`` the stored cycle has not been
                    rolled over yet, so the date counts as its last luteal
                    day.  Otherwise that date opens the next cycle.

        Returns:
            The phase ``day`` falls in.

        Raises:
            OutOfRangeDate:   See ``cycle_for``.
            DegenerateWindow: If the cycle has no room for ovulation.
        """
        if as_of is not None and day == as_of == params.next_period_start:
            # Validates the current cycle before short-circuiting
            self.partition(params)
            return CyclePhase.LUTEAL

        cycle = self.cycle_for(day, params)
        for phase, window in reversed(self.partition(cycle)):
            if day >= window.start:
                return phase
        # cycle_for guarantees cycle.period_start <= day
        raise AssertionError(f"{day} precedes projected cycle start {cycle.period_start}")

    def phase_window(self, day: date, params: CycleParameters) -> tuple[CyclePhase, DateWindow]:
        """Return the phase of ``day`` together with that phase's interval."""
        cycle = self.cycle_for(day, params)
        for phase, window in self.partition(cycle):
            if day in window:
                return phase, window
        raise AssertionError(f"{day} not covered by the partition of {cycle.period_start}")


def classify_phase(
    day: date,
    params: CycleParameters,
    as_of: date | None = None,
    config: CycleConfig | None = None,
) -> CyclePhase:
    """Classify ``day`` against ``params``.  See ``PhaseClassifier.classify``."""
    return PhaseClassifier(config).classify(day, params, as_of=as_of)
