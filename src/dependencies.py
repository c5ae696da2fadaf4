"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from fastapi import Depends

from src.config import Settings, get_settings
from src.cycles.config_loader import CycleConfig, get_cycle_config, reload_cycle_config


def get_engine_config(settings: Annotated[Settings, Depends(get_settings)]) -> CycleConfig:
    """Return the cycle engine config, honouring ``cycle_config_path``.

    The override file is loaded once into the global singleton, at startup
    via ``lifespan``; later calls reuse it.
    """
    config = get_cycle_config()
    if settings.cycle_config_path:
        override = Path(settings.cycle_config_path)
        if config.source != override:
            config = reload_cycle_config(override)
    return config


# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
EngineConfig = Annotated[CycleConfig, Depends(get_engine_config)]
