"""Tests for the dashboard status snapshot and period rollover."""

from __future__ import annotations

from datetime import date

import pytest

from src.cycles.base import CycleParameters, CyclePhase, OutOfRangeDate
from src.cycles.rollover import should_rollover
from src.cycles.status import CountdownKind, cycle_status
from src.cycles.tests.conftest import CANONICAL_START


class TestCycleStatus:
    def test_during_period(self, params: CycleParameters) -> None:
        status = cycle_status(params, as_of=date(2024, 1, 3))
        assert status.phase is CyclePhase.MENSTRUATION
        assert status.phase_name == "Menstrual Phase"
        assert status.cycle_day == 3
        assert status.countdown_kind is CountdownKind.PERIOD
        assert status.countdown_days == 3  # Jan 3, 4 and 5
        assert not status.in_fertile_window

    def test_in_fertile_window(self, params: CycleParameters) -> None:
        status = cycle_status(params, as_of=date(2024, 1, 10))
        assert status.phase is CyclePhase.FOLLICULAR
        assert status.countdown_kind is CountdownKind.NEXT_PERIOD
        assert status.countdown_days == 19
        assert status.in_fertile_window
        assert not status.is_ovulation_day
        assert status.fertility.score == 48

    def test_ovulation_day(self, params: CycleParameters) -> None:
        status = cycle_status(params, as_of=date(2024, 1, 15))
        assert status.is_ovulation_day
        assert status.phase is CyclePhase.OVULATION

    def test_luteal(self, params: CycleParameters) -> None:
        status = cycle_status(params, as_of=date(2024, 1, 20))
        assert status.phase is CyclePhase.LUTEAL
        assert not status.in_fertile_window
        assert status.next_period_start == date(2024, 1, 29)

    def test_rollover_day(self, params: CycleParameters) -> None:
        status = cycle_status(params, as_of=date(2024, 1, 29))
        assert status.phase is CyclePhase.LUTEAL
        assert status.countdown_kind is CountdownKind.NEXT_PERIOD
        assert status.countdown_days == 0
        assert status.fertility.score == 5
        assert status.fertility.phase is CyclePhase.LUTEAL
        assert status.next_period_start == date(2024, 1, 29)

    def test_projected_next_cycle(self, params: CycleParameters) -> None:
        status = cycle_status(params, as_of=date(2024, 2, 1))
        assert status.phase is CyclePhase.MENSTRUATION
        assert status.cycle_day == 4
        assert status.countdown_kind is CountdownKind.PERIOD
        assert status.countdown_days == 2
        assert status.next_period_start == date(2024, 2, 26)

    def test_beyond_horizon(self, params: CycleParameters) -> None:
        with pytest.raises(OutOfRangeDate):
            cycle_status(params, as_of=date(2025, 1, 1))

    def test_to_dict(self, params: CycleParameters) -> None:
        d = cycle_status(params, as_of=date(2024, 1, 14)).to_dict()
        assert d["phase"] == "ovulation"
        assert d["fertility"]["score"] == 95
        assert d["countdown_kind"] == "next_period"
        assert d["countdown_days"] == 15


class TestRollover:
    def test_no_rollover_before_next_period(self, params: CycleParameters) -> None:
        assert should_rollover(params, date(2024, 1, 28)) is None

    def test_rollover_on_next_period_start(self, params: CycleParameters) -> None:
        rolled = should_rollover(params, date(2024, 1, 29))
        assert rolled == CycleParameters(date(2024, 1, 29), 5, 28)

    def test_rollover_drops_explicit_end(self) -> None:
        p = CycleParameters(CANONICAL_START, 5, 28, period_end=date(2024, 1, 7))
        rolled = should_rollover(p, date(2024, 1, 29))
        assert rolled is not None
        assert rolled.period_end is None
        assert rolled.effective_period_end == date(2024, 2, 2)

    def test_missed_rollover_lands_on_current_cycle(self, params: CycleParameters) -> None:
        rolled = should_rollover(params, date(2024, 3, 1))
        assert rolled is not None
        assert rolled.period_start == date(2024, 2, 26)

    def test_rollover_is_pure(self, params: CycleParameters) -> None:
        should_rollover(params, date(2024, 1, 29))
        assert params.period_start == CANONICAL_START
