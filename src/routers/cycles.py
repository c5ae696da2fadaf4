"""Cycle engine endpoints: phase, fertility, forecast, flow, status, rollover.

All computation happens in ``src.cycles``; these handlers only translate
request models into ``CycleParameters`` and map engine errors to 422.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from src.cycles.base import CycleEngineError, CycleParameters
from src.cycles.config_loader import CycleConfig
from src.cycles.fertility import FertilityEstimator
from src.cycles.flow import FlowIntensityModel
from src.cycles.forecaster import CycleForecaster
from src.cycles.phase_classifier import PhaseClassifier
from src.cycles.rollover import should_rollover
from src.cycles.status import cycle_status
from src.dependencies import EngineConfig
from src.models.base import ErrorDetail
from src.models.cycles import (
    CycleParametersIn,
    CycleRequest,
    FertilityRequest,
    FertilityResponse,
    FlowPointResponse,
    ForecastEntryResponse,
    ForecastRequest,
    PhaseRequest,
    PhaseResponse,
    RolloverRequest,
    RolloverResponse,
    StatusRequest,
    StatusResponse,
)

logger = logging.getLogger("cyclewise.routers.cycles")

router = APIRouter(prefix="/cycles", tags=["cycles"], responses={422: {"model": ErrorDetail}})


def _rejected(exc: CycleEngineError) -> HTTPException:
    logger.warning("Rejected cycle request (%s): %s", type(exc).__name__, exc)
    return HTTPException(status_code=422, detail=str(exc))


def _parameters(body: CycleParametersIn, config: CycleConfig) -> CycleParameters:
    try:
        return body.to_parameters(config)
    except CycleEngineError as exc:
        raise _rejected(exc) from exc


@router.post("/phase", response_model=PhaseResponse)
async def classify(body: PhaseRequest, config: EngineConfig) -> Any:
    params = _parameters(body.parameters, config)
    try:
        phase = PhaseClassifier(config).classify(body.date, params, as_of=body.as_of)
    except CycleEngineError as exc:
        raise _rejected(exc) from exc
    return PhaseResponse(date=body.date, phase=phase)


@router.post("/fertility", response_model=FertilityResponse)
async def fertility(body: FertilityRequest, config: EngineConfig) -> Any:
    params = _parameters(body.parameters, config)
    try:
        estimate = FertilityEstimator(config).estimate(body.date, params)
    except CycleEngineError as exc:
        raise _rejected(exc) from exc
    return FertilityResponse.model_validate(estimate.to_dict())


@router.post("/fertility/curve", response_model=list[FertilityResponse])
async def fertility_curve(body: CycleRequest, config: EngineConfig) -> Any:
    params = _parameters(body.parameters, config)
    try:
        curve = FertilityEstimator(config).cycle_curve(params)
    except CycleEngineError as exc:
        raise _rejected(exc) from exc
    return [FertilityResponse.model_validate(e.to_dict()) for e in curve]


@router.post("/forecast", response_model=list[ForecastEntryResponse])
async def forecast(body: ForecastRequest, config: EngineConfig) -> Any:
    params = _parameters(body.parameters, config)
    try:
        entries = CycleForecaster(config).forecast(params, body.count)
    except CycleEngineError as exc:
        raise _rejected(exc) from exc
    return [ForecastEntryResponse.model_validate(e.to_dict()) for e in entries]


@router.get("/flow", response_model=list[FlowPointResponse])
async def flow(
    config: EngineConfig,
    period_length: int = Query(alias="periodLength", ge=1, le=31),
) -> Any:
    curve = FlowIntensityModel(config).curve(period_length)
    return [FlowPointResponse.model_validate(p.to_dict()) for p in curve]


@router.post("/status", response_model=StatusResponse)
async def status(body: StatusRequest, config: EngineConfig) -> Any:
    params = _parameters(body.parameters, config)
    try:
        snapshot = cycle_status(params, as_of=body.as_of, config=config)
    except CycleEngineError as exc:
        raise _rejected(exc) from exc
    return StatusResponse(
        as_of=snapshot.as_of,
        cycle_day=snapshot.cycle_day,
        phase=snapshot.phase,
        phase_name=snapshot.phase_name,
        phase_description=snapshot.phase_description,
        fertility=FertilityResponse.model_validate(snapshot.fertility.to_dict()),
        countdown_kind=snapshot.countdown_kind.value,
        countdown_days=snapshot.countdown_days,
        next_period_start=snapshot.next_period_start,
        in_fertile_window=snapshot.in_fertile_window,
        is_ovulation_day=snapshot.is_ovulation_day,
    )


@router.post("/rollover", response_model=RolloverResponse)
async def rollover(body: RolloverRequest, config: EngineConfig) -> Any:
    params = _parameters(body.parameters, config)
    rolled = should_rollover(params, body.today)
    return RolloverResponse(
        rolled_over=rolled is not None,
        parameters=CycleParametersIn.from_parameters(rolled or params),
    )
