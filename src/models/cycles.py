"""Pydantic request/response models for the cycle engine endpoints."""

from __future__ import annotations

from datetime import date

from pydantic import Field

from src.cycles.base import CycleParameters, CyclePhase
from src.cycles.config_loader import CycleConfig
from src.models.base import CyclewiseBase


# ---------- Parameters ----------

class CycleParametersIn(CyclewiseBase):
    """The plain record the app stores for the current cycle.

    Only shape is checked here; domain rules are enforced by
    ``CycleParameters`` so API and library callers share them.
    """

    period_start: date
    period_length: int
    cycle_length: int
    period_end: date | None = None

    def to_parameters(self, config: CycleConfig | None = None) -> CycleParameters:
        return CycleParameters(
            period_start=self.period_start,
            period_length=self.period_length,
            cycle_length=self.cycle_length,
            period_end=self.period_end,
            config=config,
        )

    @classmethod
    def from_parameters(cls, params: CycleParameters) -> "CycleParametersIn":
        return cls(
            period_start=params.period_start,
            period_length=params.period_length,
            cycle_length=params.cycle_length,
            period_end=params.period_end,
        )


# ---------- Requests ----------

class PhaseRequest(CyclewiseBase):
    parameters: CycleParametersIn
    date: date
    as_of: date | None = None


class FertilityRequest(CyclewiseBase):
    parameters: CycleParametersIn
    date: date


class CycleRequest(CyclewiseBase):
    parameters: CycleParametersIn


class ForecastRequest(CyclewiseBase):
    parameters: CycleParametersIn
    count: int | None = Field(default=None, ge=1)


class StatusRequest(CyclewiseBase):
    parameters: CycleParametersIn
    as_of: date | None = None


class RolloverRequest(CyclewiseBase):
    parameters: CycleParametersIn
    today: date


# ---------- Responses ----------

class PhaseResponse(CyclewiseBase):
    date: date
    phase: CyclePhase


class FertilityResponse(CyclewiseBase):
    date: date
    day: int
    phase: CyclePhase
    score: int = Field(ge=0, le=100)
    band: str


class ForecastEntryResponse(CyclewiseBase):
    index: int
    period_start: date
    period_end: date
    ovulation_start: date
    ovulation_end: date
    fertility_window_start: date
    fertility_window_end: date


class FlowPointResponse(CyclewiseBase):
    day: int
    intensity: int
    band: str


class StatusResponse(CyclewiseBase):
    as_of: date
    cycle_day: int
    phase: CyclePhase
    phase_name: str
    phase_description: str
    fertility: FertilityResponse
    countdown_kind: str
    countdown_days: int
    next_period_start: date
    in_fertile_window: bool
    is_ovulation_day: bool


class RolloverResponse(CyclewiseBase):
    rolled_over: bool
    parameters: CycleParametersIn
