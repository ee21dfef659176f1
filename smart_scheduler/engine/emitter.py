from __future__ import annotations
from typing import Iterable, List
import uuid

from smart_scheduler.schemas import ScheduledEntry
from smart_scheduler.engine.allocator import DAYS, FREE, RECESS, CellDecision


RECESS_SUBJECT = "Recess"
RECESS_TEACHER = "N/A"
FREE_SUBJECT = "Free Period"
FREE_TEACHER = "None"

SENTINEL_TEACHERS = (RECESS_TEACHER, FREE_TEACHER)


def _new_id() -> str:
    return uuid.uuid4().hex


def emit_entry(decision: CellDecision) -> ScheduledEntry:
    if decision.kind == RECESS:
        subject, teacher = RECESS_SUBJECT, RECESS_TEACHER
    elif decision.kind == FREE:
        subject, teacher = FREE_SUBJECT, FREE_TEACHER
    else:
        subject, teacher = decision.entry.subject, decision.entry.teacher
    return ScheduledEntry(
        id=_new_id(),
        day=decision.day,
        start_time=decision.slot.start,
        end_time=decision.slot.end,
        subject=subject,
        teacher_name=teacher,
        class_name=decision.school_class.name,
        division=decision.school_class.division,
        is_break=decision.kind == RECESS,
        is_lab=decision.is_lab,
    )


def emit_entries(decisions: Iterable[CellDecision]) -> List[ScheduledEntry]:
    return [emit_entry(d) for d in decisions]


def sort_entries(entries: Iterable[ScheduledEntry]) -> List[ScheduledEntry]:
    order = {day: i for i, day in enumerate(DAYS)}
    return sorted(entries, key=lambda e: (order.get(e.day, len(DAYS)), e.start_time))
