"""Core types for the Cyclewise cycle engine.

``CycleParameters`` is the single input record every engine component
consumes.  It is validated once at construction and never mutated; all
derived dates (effective period end, next period start) are recomputed on
access.  The error taxonomy shared by every component also lives here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Mapping

from src.cycles.config_loader import CycleConfig, get_cycle_config

logger = logging.getLogger("cyclewise.cycles")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class CycleEngineError(ValueError):
    """Base class for every failure reported by the cycle engine."""


class InvalidParameters(CycleEngineError):
    """Out-of-domain values or inconsistent date ordering."""


class DegenerateWindow(CycleEngineError):
    """The derived ovulation window collapses into the period."""


class OutOfRangeDate(CycleEngineError):
    """A date too far from the current cycle to classify reliably."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CyclePhase(str, Enum):
    """The four physiological phases, in cycle order."""

    MENSTRUATION = "menstruation"
    FOLLICULAR = "follicular"
    OVULATION = "ovulation"
    LUTEAL = "luteal"


# ---------------------------------------------------------------------------
# Date helpers
# ---------------------------------------------------------------------------


def parse_calendar_date(value: Any, field_name: str = "date") -> date:
    """Coerce a date, datetime, or ISO-8601 string to a calendar date.

    ISO datetimes (``2024-01-01T00:00:00.000Z``) are reduced to the date
    as written; no timezone conversion is applied.

    Raises:
        InvalidParameters: If the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
    raise InvalidParameters(f"{field_name} must be an ISO-8601 date, got {value!r}")


@dataclass(frozen=True)
class DateWindow:
    """Inclusive range of calendar dates."""

    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end

    def dates(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range(max(self.days, 0))]


# ---------------------------------------------------------------------------
# Cycle parameters
# ---------------------------------------------------------------------------


def _require_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameters(f"{name} must be an integer number of days, got {value!r}")
    return value


@dataclass(frozen=True)
class CycleParameters:
    """Validated description of the current cycle.

    Attributes:
        period_start:  First day of the most recent (or current) flow.
        period_length: Observed period length in days, used when no explicit
                       end date is given.
        cycle_length:  Averaged cycle length in days.
        period_end:    Explicit last day of the current period.  Takes
                       precedence over ``period_start + period_length - 1``.
        config:        Config whose domains the lengths are checked against.
                       Defaults to the global config.  Carried over by
                       ``shifted`` and ignored in comparisons.

    Raises:
        InvalidParameters: On construction, when a length is outside its
                           configured domain, the end precedes the start, or
                           the period is not shorter than the cycle.
    """

    period_start: date
    period_length: int
    cycle_length: int
    period_end: date | None = None
    config: CycleConfig | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        validate_parameters(self, self.config or get_cycle_config())

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_record(
        cls, record: Mapping[str, Any], config: CycleConfig | None = None
    ) -> "CycleParameters":
        """Build parameters from the plain record stored by the app.

        Accepts camelCase (``periodStart``) or snake_case keys.  Lengths may
        be ints or digit strings, as the original local storage held them.
        ``config`` selects the domains to validate against.
        """

        def pick(camel: str, snake: str) -> Any:
            if camel in record:
                return record[camel]
            return record.get(snake)

        start = pick("periodStart", "period_start")
        if start is None:
            raise InvalidParameters("periodStart is required")

        lengths: dict[str, int] = {}
        for camel, snake in (("periodLength", "period_length"), ("cycleLength", "cycle_length")):
            raw = pick(camel, snake)
            if raw is None:
                raise InvalidParameters(f"{camel} is required")
            if isinstance(raw, str) and raw.strip().isdigit():
                raw = int(raw.strip())
            lengths[snake] = _require_int(raw, camel)

        end = pick("periodEnd", "period_end")
        return cls(
            period_start=parse_calendar_date(start, "periodStart"),
            period_length=lengths["period_length"],
            cycle_length=lengths["cycle_length"],
            period_end=parse_calendar_date(end, "periodEnd") if end else None,
            config=config,
        )

    # ------------------------------------------------------------------
    # Derived dates
    # ------------------------------------------------------------------

    @property
    def effective_period_end(self) -> date:
        if self.period_end is not None:
            return self.period_end
        return self.period_start + timedelta(days=self.period_length - 1)

    @property
    def next_period_start(self) -> date:
        return self.period_start + timedelta(days=self.cycle_length)

    @property
    def period_days(self) -> int:
        """Inclusive length of the effective period."""
        return (self.effective_period_end - self.period_start).days + 1

    @property
    def period_window(self) -> DateWindow:
        return DateWindow(self.period_start, self.effective_period_end)

    @property
    def cycle_window(self) -> DateWindow:
        return DateWindow(self.period_start, self.next_period_start - timedelta(days=1))

    def cycle_day(self, day: date) -> int:
        """1-based day number of ``day`` relative to ``period_start``."""
        return (day - self.period_start).days + 1

    def cycle_index(self, day: date) -> int:
        """How many whole cycles ``day`` lies from the current one."""
        return (day - self.period_start).days // self.cycle_length

    def shifted(self, cycles: int) -> "CycleParameters":
        """Parameters for the cycle ``cycles`` cycle lengths away.

        The explicit period end only describes the current cycle, so other
        cycles fall back to ``period_length``.
        """
        if cycles == 0:
            return self
        return replace(
            self,
            period_start=self.period_start + timedelta(days=cycles * self.cycle_length),
            period_end=None,
        )

    def to_record(self) -> dict[str, Any]:
        """Inverse of ``from_record``, camelCase with ISO dates."""
        record: dict[str, Any] = {
            "periodStart": self.period_start.isoformat(),
            "periodLength": self.period_length,
            "cycleLength": self.cycle_length,
        }
        if self.period_end is not None:
            record["periodEnd"] = self.period_end.isoformat()
        return record


def validate_parameters(params: CycleParameters, config: CycleConfig) -> None:
    """Check a parameter set against the configured domains.

    Raises:
        InvalidParameters: Describing the first violated rule.
    """
    if not isinstance(params.period_start, date) or isinstance(params.period_start, datetime):
        raise InvalidParameters(
            f"period_start must be a calendar date, got {params.period_start!r}"
        )
    if params.period_end is not None and (
        not isinstance(params.period_end, date) or isinstance(params.period_end, datetime)
    ):
        raise InvalidParameters(f"period_end must be a calendar date, got {params.period_end!r}")

    period_length = _require_int(params.period_length, "period_length")
    cycle_length = _require_int(params.cycle_length, "cycle_length")

    if not config.period_length.contains(period_length):
        raise InvalidParameters(
            f"period_length {period_length} is outside {config.period_length} days"
        )
    if not config.cycle_length.contains(cycle_length):
        raise InvalidParameters(
            f"cycle_length {cycle_length} is outside {config.cycle_length} days"
        )
    if cycle_length <= period_length:
        raise InvalidParameters(
            f"cycle_length ({cycle_length}) must be longer than period_length ({period_length})"
        )
    if params.period_end is not None:
        if params.period_end < params.period_start:
            raise InvalidParameters(
                f"period_end {params.period_end} is before period_start {params.period_start}"
            )
        if params.period_days >= cycle_length:
            raise InvalidParameters(
                f"period of {params.period_days} days does not fit in a "
                f"{cycle_length}-day cycle"
            )
    logger.debug(
        "Validated cycle parameters start=%s period=%d cycle=%d end=%s",
        params.period_start,
        period_length,
        cycle_length,
        params.period_end,
    )


def ensure_valid_for(params: CycleParameters, config: CycleConfig) -> None:
    """Re-check ``params`` when they were validated against another config.

    Raises:
        InvalidParameters: If ``params`` break one of ``config``'s domains.
    """
    if (params.config or get_cycle_config()) is not config:
        validate_parameters(params, config)


# ---------------------------------------------------------------------------
# Forecast output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleForecastEntry:
    """One forecasted cycle.

    Attributes:
        index:                  0 for the current cycle, 1 for the next, ...
        period_start:           First day of flow.
        period_end:             Last day of flow.
        ovulation_start:        First day of the ovulation window.
        ovulation_end:          Last day of the ovulation window.
        fertility_window_start: First day of the fertile window.
        fertility_window_end:   Last day of the fertile window.
    """

    index: int
    period_start: date
    period_end: date
    ovulation_start: date
    ovulation_end: date
    fertility_window_start: date
    fertility_window_end: date

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "ovulation_start": self.ovulation_start.isoformat(),
            "ovulation_end": self.ovulation_end.isoformat(),
            "fertility_window_start": self.fertility_window_start.isoformat(),
            "fertility_window_end": self.fertility_window_end.isoformat(),
        }
