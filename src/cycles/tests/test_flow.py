"""Tests for the synthetic flow intensity curve."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from src.cycles.base import CycleParameters
from src.cycles.flow import FlowIntensityModel, flow_intensity
from src.cycles.tests.conftest import CANONICAL_START


class TestFlowCurve:
    def test_five_day_period(self) -> None:
        curve = flow_intensity(5)
        assert [p.intensity for p in curve] == [7, 9, 11, 9, 7]
        assert [p.band for p in curve] == ["Light", "Medium", "Medium", "Medium", "Light"]
        assert [p.day for p in curve] == [1, 2, 3, 4, 5]

    def test_even_period_has_flat_top(self) -> None:
        assert [p.intensity for p in flow_intensity(6)] == [7, 9, 11, 11, 9, 7]

    def test_long_period_reaches_heavy(self) -> None:
        curve = flow_intensity(10)
        assert max(p.intensity for p in curve) == 15
        assert curve[4].band == "Heavy"

    def test_non_positive_length_is_empty(self) -> None:
        assert flow_intensity(0) == []
        assert flow_intensity(-3) == []

    @pytest.mark.parametrize("length", range(1, 11))
    def test_symmetric_bell(self, length: int) -> None:
        values = [p.intensity for p in flow_intensity(length)]
        assert values == values[::-1]
        assert values[0] == 7

    def test_to_dict_without_date(self) -> None:
        assert flow_intensity(2)[0].to_dict() == {"day": 1, "intensity": 7, "band": "Light"}


class TestDatedCurve:
    def test_dates_and_today_flag(self) -> None:
        p = CycleParameters(CANONICAL_START, 5, 28)
        points = FlowIntensityModel().for_period(p, as_of=date(2024, 1, 3))
        assert [pt.date for pt in points][0] == date(2024, 1, 1)
        assert [pt.is_today for pt in points] == [False, False, True, False, False]
        assert points[2].to_dict()["date"] == "2024-01-03"

    def test_uses_explicit_period_span(self) -> None:
        p = CycleParameters(CANONICAL_START, 5, 28, period_end=date(2024, 1, 7))
        points = FlowIntensityModel().for_period(p, as_of=date(2024, 2, 1))
        assert len(points) == 7
        assert not any(pt.is_today for pt in points)

    def test_logs_under_cycles_namespace(self, caplog: pytest.LogCaptureFixture) -> None:
        p = CycleParameters(CANONICAL_START, 5, 28)
        with caplog.at_level(logging.DEBUG, logger="cyclewise.cycles.flow"):
            FlowIntensityModel().for_period(p, as_of=date(2024, 1, 3))
        assert any(r.name == "cyclewise.cycles.flow" for r in caplog.records)
