from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from planner.config import (
    DEFAULT_BACKTRACK_DEADLINE_MILLIS,
    DEFAULT_RESHUFFLE_ATTEMPTS,
    EXPORT_DIR,
    EXPORT_DIR_ENV,
    LOG_LEVEL,
    PLANNER_CONFIG_ENV,
    PLANNER_CONFIG_FILE_PATH,
    PRUNE_FREQUENCY_THRESHOLD,
)
from planner.services.pairing_generator import GeneratorSettings, Strategy
from planner.services.schedule_service import SelectionAlgorithm


class PlannerSettings(BaseModel):
    algorithm: SelectionAlgorithm = SelectionAlgorithm.EXHAUSTIVE
    seed: int | None = None
    reshuffle_attempts: int = Field(default=DEFAULT_RESHUFFLE_ATTEMPTS, ge=1)
    backtrack_deadline_millis: int = Field(default=DEFAULT_BACKTRACK_DEADLINE_MILLIS, ge=1)
    prune_frequency_threshold: int = Field(default=PRUNE_FREQUENCY_THRESHOLD, ge=1)
    export_dir: str = str(EXPORT_DIR)
    log_level: str = LOG_LEVEL

    def generator_settings(self) -> GeneratorSettings:
        strategy = Strategy.GREEDY_SHUFFLE
        if self.algorithm == SelectionAlgorithm.BACKTRACK_RANDOM:
            strategy = Strategy.BACKTRACK_RANDOM
        return GeneratorSettings(
            strategy=strategy,
            seed=self.seed,
            reshuffle_attempts=self.reshuffle_attempts,
            backtrack_deadline_millis=self.backtrack_deadline_millis,
            prune_frequency_threshold=self.prune_frequency_threshold,
        )


DEFAULT_SETTINGS = PlannerSettings()


def config_path_from_env() -> Path:
    raw = (os.environ.get(PLANNER_CONFIG_ENV) or "").strip()
    return Path(raw) if raw else PLANNER_CONFIG_FILE_PATH


def _with_env_overrides(settings: PlannerSettings) -> PlannerSettings:
    export_dir = (os.environ.get(EXPORT_DIR_ENV) or "").strip()
    if export_dir:
        return settings.model_copy(update={"export_dir": export_dir})
    return settings


def load_planner_settings(path: Path | None = None) -> tuple[PlannerSettings, dict[str, Any]]:
    """
    Returns parsed settings + metadata.
    Metadata contains source and optional error string; a broken file
    never stops the service, it just runs on defaults.
    """
    path = path or config_path_from_env()
    if not path.exists():
        return _with_env_overrides(DEFAULT_SETTINGS), {"source": "defaults", "path": str(path), "error": None}

    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except Exception as exc:
        return _with_env_overrides(DEFAULT_SETTINGS), {"source": "defaults", "path": str(path), "error": f"read_error: {exc}"}

    try:
        parsed = PlannerSettings.model_validate(payload)
        return _with_env_overrides(parsed), {"source": "file", "path": str(path), "error": None}
    except ValidationError as exc:
        return _with_env_overrides(DEFAULT_SETTINGS), {"source": "defaults", "path": str(path), "error": f"validation_error: {exc}"}


def settings_as_dict(settings: PlannerSettings) -> dict[str, Any]:
    return settings.model_dump(mode="json")
