from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Set
import logging
import random

from smart_scheduler.schemas import ScheduleConfig, SchoolClass
from smart_scheduler.engine.inventory import DemandLedger, LedgerEntry
from smart_scheduler.engine.slots import TimeSlot, build_time_slots


logger = logging.getLogger(__name__)

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

RECESS = "recess"
FREE = "free"
SESSION = "session"


@dataclass
class CellDecision:
    day: str
    slot: TimeSlot
    school_class: SchoolClass
    kind: str
    entry: Optional[LedgerEntry] = None
    is_lab: bool = False


@dataclass
class AllocationResult:
    slots: List[TimeSlot]
    ledger: DemandLedger
    decisions: List[CellDecision] = field(default_factory=list)

    @property
    def placed_sessions(self) -> int:
        return self.ledger.placed_sessions


class GreedyAllocator:
    """Single-pass greedy filler for the weekly (day x slot x class) grid.

    Cells are visited day by day, slot by slot, class by class in roster
    order and each one is decided exactly once. Lab placements win over
    lecture placements; ties are broken with ``rng``.
    """

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng

    # --- Public API ---
    def run(self, config: ScheduleConfig) -> AllocationResult:
        slots = build_time_slots(
            config.start_time,
            config.lecture_duration,
            config.lecture_count,
            config.break_after,
            config.break_duration,
        )
        ledger = DemandLedger.from_assignments(config.teachers)
        result = AllocationResult(slots=slots, ledger=ledger)
        for day in DAYS:
            for slot in slots:
                if slot.is_break:
                    for cls in config.classes:
                        result.decisions.append(CellDecision(day, slot, cls, RECESS))
                    continue
                self._fill_slot(day, slot, config.classes, ledger, result.decisions)
            logger.debug("%s filled, %d sessions still unplaced", day, ledger.remaining_sessions)
        return result

    # --- Internals ---
    def _fill_slot(
        self,
        day: str,
        slot: TimeSlot,
        classes: List[SchoolClass],
        ledger: DemandLedger,
        out: List[CellDecision],
    ) -> None:
        busy_teachers: Set[str] = set()
        busy_lab_subjects: Set[str] = set()
        for cls in classes:
            candidates = ledger.for_class(cls.name, cls.division)
            eligible = [e for e in candidates if self._is_eligible(e, busy_teachers, busy_lab_subjects)]
            if not eligible:
                out.append(CellDecision(day, slot, cls, FREE))
                continue

            lab_options = [e for e in eligible if self._can_lab(e, busy_lab_subjects)]
            if lab_options:
                chosen = self.rng.choice(lab_options)
                chosen.consume_lab()
                busy_lab_subjects.add(chosen.subject)
                is_lab = True
            else:
                # only lecture placements remain at this point
                chosen = self.rng.choice(eligible)
                chosen.consume_lecture()
                is_lab = False
            busy_teachers.add(chosen.teacher)
            out.append(CellDecision(day, slot, cls, SESSION, entry=chosen, is_lab=is_lab))

    @staticmethod
    def _can_lab(entry: LedgerEntry, busy_lab_subjects: Set[str]) -> bool:
        return entry.labs_remaining > 0 and entry.subject not in busy_lab_subjects

    def _is_eligible(self, entry: LedgerEntry, busy_teachers: Set[str], busy_lab_subjects: Set[str]) -> bool:
        if entry.teacher in busy_teachers:
            return False
        return entry.lectures_remaining > 0 or self._can_lab(entry, busy_lab_subjects)


def allocate(config: ScheduleConfig, rng: random.Random) -> AllocationResult:
    return GreedyAllocator(rng).run(config)
