from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging
import os


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _log_level_env(name: str, default: str) -> str:
    level = os.getenv(name, "").strip().upper() or default
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{name} must be a logging level name, got {level!r}")
    return level


@dataclass(frozen=True)
class Settings:
    random_seed: Optional[int] = None
    strategy: str = "greedy"
    best_of_attempts: int = 8
    max_lecture_count: int = 16
    max_assignments: int = 500
    max_classes: int = 100
    max_stored_schedules: int = 20
    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings(
        random_seed=_int_env("SCHEDULER_RANDOM_SEED", None),
        strategy=os.getenv("SCHEDULER_STRATEGY", "greedy"),
        best_of_attempts=_int_env("SCHEDULER_BEST_OF_ATTEMPTS", 8),
        max_lecture_count=_int_env("SCHEDULER_MAX_LECTURE_COUNT", 16),
        max_assignments=_int_env("SCHEDULER_MAX_ASSIGNMENTS", 500),
        max_classes=_int_env("SCHEDULER_MAX_CLASSES", 100),
        max_stored_schedules=_int_env("SCHEDULER_MAX_STORED_SCHEDULES", 20),
        log_level=_log_level_env("SCHEDULER_LOG_LEVEL", "INFO"),
    )
