"""Cyclewise menstrual cycle engine.

Pure, stateless computations over one ``CycleParameters`` record: phase
classification, fertility estimates, cycle forecasts and the flow chart
curve.  Nothing here persists or caches anything; callers own storage.

Modules:
    config_loader    - Load/validate/hot-reload cycle_config.yaml
    base             - CycleParameters, CyclePhase, error taxonomy
    ovulation        - Ovulation and fertile window derivation
    phase_classifier - Date → phase
    fertility        - Date → fertility score and band
    forecaster       - Next N cycles
    flow             - Synthetic flow intensity curve
    status           - Dashboard snapshot for one evaluation date
    rollover         - New-period detection
"""

from src.cycles.base import (
    CycleEngineError,
    CycleForecastEntry,
    CycleParameters,
    CyclePhase,
    DegenerateWindow,
    InvalidParameters,
    OutOfRangeDate,
)
from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.fertility import FertilityEstimate, FertilityEstimator, estimate_fertility
from src.cycles.flow import FlowIntensityModel, FlowPoint, flow_intensity
from src.cycles.forecaster import CycleForecaster, forecast_cycles
from src.cycles.ovulation import OvulationWindow
from src.cycles.phase_classifier import PhaseClassifier, classify_phase
from src.cycles.rollover import should_rollover
from src.cycles.status import CycleStatus, cycle_status

__all__ = [
    "CycleConfig",
    "get_cycle_config",
    "CycleParameters",
    "CyclePhase",
    "CycleForecastEntry",
    "CycleEngineError",
    "InvalidParameters",
    "DegenerateWindow",
    "OutOfRangeDate",
    "OvulationWindow",
    "PhaseClassifier",
    "classify_phase",
    "FertilityEstimator",
    "FertilityEstimate",
    "estimate_fertility",
    "CycleForecaster",
    "forecast_cycles",
    "FlowIntensityModel",
    "FlowPoint",
    "flow_intensity",
    "CycleStatus",
    "cycle_status",
    "should_rollover",
]
