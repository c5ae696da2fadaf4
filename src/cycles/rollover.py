"""Detect when stored cycle parameters should move on to a new period.

Pure: the caller decides whether to persist the returned parameters.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta

from src.cycles.base import CycleParameters

logger = logging.getLogger("cyclewise.cycles.rollover")


def should_rollover(params: CycleParameters, today: date) -> CycleParameters | None:
    """Return parameters for the new cycle once ``next_period_start`` arrives.

    Args:
        params: Stored cycle parameters.
        today:  Evaluation date.

    Returns:
        ``None`` while ``today`` is before ``next_period_start``.  Otherwise
        parameters starting on the latest projected period start on or before
        ``today``, with the same lengths and no explicit end.  Callers that
        missed the rollover day therefore land on the cycle ``today`` is in.
    """
    if today < params.next_period_start:
        return None

    cycles = params.cycle_index(today)
    new_start = params.period_start + timedelta(days=cycles * params.cycle_length)
    rolled = replace(params, period_start=new_start, period_end=None)
    logger.info(
        "Rolling cycle over from %s to %s (%d cycle(s))",
        params.period_start,
        new_start,
        cycles,
    )
    return rolled
