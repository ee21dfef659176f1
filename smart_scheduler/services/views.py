from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence

from smart_scheduler.schemas import FulfilmentRow, ScheduledEntry
from smart_scheduler.engine.allocator import DAYS, AllocationResult
from smart_scheduler.engine.emitter import SENTINEL_TEACHERS


def time_rows(entries: Iterable[ScheduledEntry]) -> List[str]:
    return sorted({e.start_time for e in entries})


def _index(entries: Sequence[ScheduledEntry], **match) -> Dict[tuple, ScheduledEntry]:
    out: Dict[tuple, ScheduledEntry] = {}
    for e in entries:
        if all(getattr(e, k) == v for k, v in match.items()):
            out.setdefault((e.day, e.start_time), e)
    return out


def class_grid(entries: Sequence[ScheduledEntry], class_name: str, division: str) -> List[Dict[str, str]]:
    """One row per start time, one column per day, for a single class."""
    cells = _index(entries, class_name=class_name, division=division)
    rows: List[Dict[str, str]] = []
    for time in time_rows(entries):
        row = {"time": time}
        for day in DAYS:
            entry = cells.get((day, time))
            if entry is None:
                row[day] = "-"
            elif entry.is_lab:
                row[day] = f"PRACTICAL: {entry.subject}"
            else:
                row[day] = entry.subject
        rows.append(row)
    return rows


def teacher_duty(entries: Sequence[ScheduledEntry], teacher_name: str) -> List[Dict[str, str]]:
    """Duty chart for one teacher; recess rows are marked for everyone."""
    duties = _index(entries, teacher_name=teacher_name)
    recess = {(e.day, e.start_time) for e in entries if e.is_break}
    rows: List[Dict[str, str]] = []
    for time in time_rows(entries):
        row = {"time": time}
        for day in DAYS:
            entry = duties.get((day, time))
            if (day, time) in recess:
                row[day] = "RECESS"
            elif entry is not None:
                prefix = "LAB: " if entry.is_lab else ""
                row[day] = f"{prefix}{entry.subject} ({entry.class_name}-{entry.division})"
            else:
                row[day] = "No Duty"
        rows.append(row)
    return rows


def teacher_names(entries: Iterable[ScheduledEntry], query: Optional[str] = None) -> List[str]:
    names = {e.teacher_name for e in entries if not e.is_break and e.teacher_name not in SENTINEL_TEACHERS}
    if query:
        q = query.lower()
        names = {n for n in names if q in n.lower()}
    return sorted(names)


def fulfilment(result: AllocationResult) -> List[FulfilmentRow]:
    return [
        FulfilmentRow(
            teacher_name=e.key.teacher,
            subject=e.key.subject,
            class_name=e.key.class_name,
            division=e.key.division,
            lectures_configured=e.lectures_configured,
            lectures_placed=e.lectures_placed,
            labs_configured=e.labs_configured,
            labs_placed=e.labs_placed,
        )
        for e in result.ledger
    ]
