from __future__ import annotations
from typing import Dict, List, Optional
from collections import OrderedDict
from dataclasses import dataclass, field
import logging
import random
import uuid

from smart_scheduler.config import Settings, get_settings
from smart_scheduler.schemas import GenerateRequest, ScheduleResponse
from smart_scheduler.engine.emitter import emit_entries
from smart_scheduler.engine.search import Strategy, run_strategy
from smart_scheduler.services.validation import validate_config
from smart_scheduler.services import views


logger = logging.getLogger(__name__)


@dataclass
class State:
    schedules: OrderedDict[str, ScheduleResponse] = field(default_factory=OrderedDict)  # schedule_id -> generated run, oldest first


class ScheduleService:
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.state = State()

    def _resolve_strategy(self, requested: Optional[str]) -> Strategy:
        name = requested or self.settings.strategy
        try:
            return Strategy(name)
        except ValueError:
            raise ValueError(f"Unknown strategy {name!r}, expected one of: greedy, best_of") from None

    def generate(self, req: GenerateRequest) -> ScheduleResponse:
        config = req.config
        validate_config(config, self.settings)
        strategy = self._resolve_strategy(req.strategy)

        seed = req.seed if req.seed is not None else self.settings.random_seed
        rng = random.Random(seed)
        result = run_strategy(config, strategy, rng, attempts=self.settings.best_of_attempts)

        entries = emit_entries(result.decisions)
        report = views.fulfilment(result)
        schedule = ScheduleResponse(
            schedule_id=uuid.uuid4().hex,
            strategy=strategy.value,
            seed=seed,
            entries=entries,
            fulfilment=report,
        )
        self._store(schedule)
        logger.info(
            "Generated schedule %s: %d classes, %d assignments, strategy=%s, placed=%d, unmet=%d",
            schedule.schedule_id,
            len(config.classes),
            len(result.ledger),
            strategy.value,
            result.placed_sessions,
            sum(row.unmet for row in report),
        )
        return schedule

    def _store(self, schedule: ScheduleResponse) -> None:
        schedules = self.state.schedules
        schedules[schedule.schedule_id] = schedule
        while len(schedules) > max(1, self.settings.max_stored_schedules):
            evicted, _ = schedules.popitem(last=False)
            logger.debug("Evicted schedule %s", evicted)

    def get_schedule(self, schedule_id: str) -> Optional[ScheduleResponse]:
        return self.state.schedules.get(schedule_id)

    def class_view(self, schedule_id: str, class_name: str, division: str) -> Optional[List[Dict[str, str]]]:
        schedule = self.get_schedule(schedule_id)
        if schedule is None:
            return None
        return views.class_grid(schedule.entries, class_name, division)

    def teacher_view(self, schedule_id: str, teacher_name: str) -> Optional[List[Dict[str, str]]]:
        schedule = self.get_schedule(schedule_id)
        if schedule is None:
            return None
        return views.teacher_duty(schedule.entries, teacher_name)

    def teachers(self, schedule_id: str, query: Optional[str] = None) -> Optional[List[str]]:
        schedule = self.get_schedule(schedule_id)
        if schedule is None:
            return None
        return views.teacher_names(schedule.entries, query)
