"""Tests for CycleParameters validation and the ovulation window."""

from __future__ import annotations

import dataclasses
from datetime import date

import pytest

from src.cycles.base import (
    CycleEngineError,
    CycleParameters,
    DegenerateWindow,
    InvalidParameters,
    parse_calendar_date,
)
from src.cycles.ovulation import OvulationWindow, fertile_window, ovulation_window
from src.cycles.tests.conftest import (
    CANONICAL_START,
    degenerate_combinations,
    valid_combinations,
)


class TestDerivedDates:
    def test_canonical_scenario(self, params: CycleParameters) -> None:
        assert params.effective_period_end == date(2024, 1, 5)
        assert params.next_period_start == date(2024, 1, 29)
        assert params.period_days == 5

    def test_explicit_end_takes_precedence(self) -> None:
        p = CycleParameters(CANONICAL_START, 5, 28, period_end=date(2024, 1, 7))
        assert p.effective_period_end == date(2024, 1, 7)
        assert p.period_days == 7

    def test_cycle_day(self, params: CycleParameters) -> None:
        assert params.cycle_day(date(2024, 1, 1)) == 1
        assert params.cycle_day(date(2024, 1, 28)) == 28

    def test_cycle_index(self, params: CycleParameters) -> None:
        assert params.cycle_index(date(2024, 1, 28)) == 0
        assert params.cycle_index(date(2024, 1, 29)) == 1
        assert params.cycle_index(date(2023, 12, 31)) == -1

    def test_shifted_drops_explicit_end(self) -> None:
        p = CycleParameters(CANONICAL_START, 5, 28, period_end=date(2024, 1, 7))
        nxt = p.shifted(1)
        assert nxt.period_start == date(2024, 1, 29)
        assert nxt.period_end is None
        assert nxt.effective_period_end == date(2024, 2, 2)
        assert p.shifted(0) is p

    def test_is_immutable(self, params: CycleParameters) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.cycle_length = 30  # type: ignore[misc]


class TestValidation:
    def test_cycle_not_longer_than_period_rejected(self) -> None:
        with pytest.raises(InvalidParameters):
            CycleParameters(CANONICAL_START, period_length=21, cycle_length=20)

    @pytest.mark.parametrize("period_length", [0, 1, 11])
    def test_period_length_domain(self, period_length: int) -> None:
        with pytest.raises(InvalidParameters, match="period_length"):
            CycleParameters(CANONICAL_START, period_length, 28)

    @pytest.mark.parametrize("cycle_length", [19, 37, 60])
    def test_cycle_length_domain(self, cycle_length: int) -> None:
        with pytest.raises(InvalidParameters, match="cycle_length"):
            CycleParameters(CANONICAL_START, 5, cycle_length)

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(InvalidParameters, match="before period_start"):
            CycleParameters(CANONICAL_START, 5, 28, period_end=date(2023, 12, 31))

    def test_explicit_period_must_fit_in_cycle(self) -> None:
        with pytest.raises(InvalidParameters, match="does not fit"):
            CycleParameters(CANONICAL_START, 5, 28, period_end=date(2024, 1, 28))

    def test_bool_is_not_a_length(self) -> None:
        with pytest.raises(InvalidParameters):
            CycleParameters(CANONICAL_START, True, 28)  # type: ignore[arg-type]

    def test_datetime_start_rejected(self) -> None:
        from datetime import datetime

        with pytest.raises(InvalidParameters, match="calendar date"):
            CycleParameters(datetime(2024, 1, 1, 12, 0), 5, 28)  # type: ignore[arg-type]

    def test_errors_share_base_class(self) -> None:
        assert issubclass(InvalidParameters, CycleEngineError)
        assert issubclass(CycleEngineError, ValueError)


class TestFromRecord:
    def test_camel_case_record(self) -> None:
        p = CycleParameters.from_record(
            {"periodStart": "2024-01-01", "periodLength": 5, "cycleLength": 28}
        )
        assert p == CycleParameters(CANONICAL_START, 5, 28)

    def test_snake_case_record_with_end(self) -> None:
        p = CycleParameters.from_record(
            {
                "period_start": "2024-01-01",
                "period_length": 5,
                "cycle_length": 28,
                "period_end": "2024-01-06",
            }
        )
        assert p.effective_period_end == date(2024, 1, 6)

    def test_local_storage_shapes(self) -> None:
        """Lengths stored as strings and dates stored via toISOString()."""
        p = CycleParameters.from_record(
            {
                "periodStart": "2024-01-01T00:00:00.000Z",
                "periodLength": "5",
                "cycleLength": "28",
            }
        )
        assert p.period_start == CANONICAL_START
        assert p.cycle_length == 28

    def test_missing_key(self) -> None:
        with pytest.raises(InvalidParameters, match="cycleLength"):
            CycleParameters.from_record({"periodStart": "2024-01-01", "periodLength": 5})

    def test_bad_date(self) -> None:
        with pytest.raises(InvalidParameters, match="periodStart"):
            CycleParameters.from_record(
                {"periodStart": "01/02/2024", "periodLength": 5, "cycleLength": 28}
            )

    def test_to_record_round_trip(self) -> None:
        p = CycleParameters(CANONICAL_START, 5, 28, period_end=date(2024, 1, 6))
        assert CycleParameters.from_record(p.to_record()) == p

    def test_parse_calendar_date_accepts_dates(self) -> None:
        assert parse_calendar_date(date(2024, 3, 1)) == date(2024, 3, 1)
        assert parse_calendar_date(" 2024-03-01 ") == date(2024, 3, 1)


class TestOvulationWindow:
    def test_canonical_window(self, params: CycleParameters) -> None:
        ov = ovulation_window(params)
        assert ov.start == date(2024, 1, 13)
        assert ov.end == date(2024, 1, 15)
        assert ov.days == 3

    def test_fertile_window(self, params: CycleParameters) -> None:
        window = fertile_window(params)
        assert window.start == date(2024, 1, 8)
        assert window.end == date(2024, 1, 15)

    def test_luteal_length_fixed_across_cycle_lengths(self) -> None:
        for cycle in (24, 28, 35):
            p = CycleParameters(CANONICAL_START, 5, cycle)
            ov = OvulationWindow.for_cycle(p)
            assert (p.next_period_start - ov.end).days == 14

    @pytest.mark.parametrize("period_length,cycle_length", valid_combinations())
    def test_window_strictly_inside_cycle(self, period_length: int, cycle_length: int) -> None:
        p = CycleParameters(CANONICAL_START, period_length, cycle_length)
        ov = OvulationWindow.for_cycle(p)
        assert p.effective_period_end < ov.start <= ov.end < p.next_period_start

    @pytest.mark.parametrize("period_length,cycle_length", degenerate_combinations())
    def test_degenerate_window_reported(self, period_length: int, cycle_length: int) -> None:
        p = CycleParameters(CANONICAL_START, period_length, cycle_length)
        with pytest.raises(DegenerateWindow):
            OvulationWindow.for_cycle(p)

    def test_long_explicit_period_degenerates(self) -> None:
        p = CycleParameters(CANONICAL_START, 5, 28, period_end=date(2024, 1, 13))
        with pytest.raises(DegenerateWindow):
            OvulationWindow.for_cycle(p)
