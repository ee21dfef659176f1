from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Tuple

from smart_scheduler.schemas import TeachingAssignment


class DemandKey(NamedTuple):
    teacher: str
    subject: str
    class_name: str
    division: str

    def __str__(self) -> str:
        return "|".join(self)


@dataclass
class LedgerEntry:
    key: DemandKey
    lectures_configured: int
    labs_configured: int
    lectures_remaining: int
    labs_remaining: int

    @property
    def teacher(self) -> str:
        return self.key.teacher

    @property
    def subject(self) -> str:
        return self.key.subject

    @property
    def lectures_placed(self) -> int:
        return self.lectures_configured - self.lectures_remaining

    @property
    def labs_placed(self) -> int:
        return self.labs_configured - self.labs_remaining

    def consume_lecture(self) -> None:
        if self.lectures_remaining <= 0:
            raise ValueError(f"No lectures left for {self.key}")
        self.lectures_remaining -= 1

    def consume_lab(self) -> None:
        if self.labs_remaining <= 0:
            raise ValueError(f"No labs left for {self.key}")
        self.labs_remaining -= 1


class DemandLedger:
    """Remaining weekly sessions per teaching assignment, for one run only.

    Assignments sharing the same (teacher, subject, class, division) key are
    merged by summing their quotas. Entries are also indexed per
    (class, division) in first-seen order so the allocator can look up a
    class's candidates without scanning every assignment.
    """

    def __init__(self) -> None:
        self.entries: Dict[DemandKey, LedgerEntry] = {}
        self._by_class: Dict[Tuple[str, str], List[LedgerEntry]] = {}

    @classmethod
    def from_assignments(cls, assignments: Iterable[TeachingAssignment]) -> "DemandLedger":
        ledger = cls()
        for a in assignments:
            ledger.add(a)
        return ledger

    def add(self, assignment: TeachingAssignment) -> LedgerEntry:
        key = DemandKey(assignment.name, assignment.subject, assignment.target_class, assignment.target_division)
        lectures = int(assignment.lectures_per_week)
        labs = int(assignment.labs_per_week)
        entry = self.entries.get(key)
        if entry is None:
            entry = LedgerEntry(key=key, lectures_configured=lectures, labs_configured=labs,
                                lectures_remaining=lectures, labs_remaining=labs)
            self.entries[key] = entry
            self._by_class.setdefault((key.class_name, key.division), []).append(entry)
        else:
            # duplicate key: merge by sum
            entry.lectures_configured += lectures
            entry.labs_configured += labs
            entry.lectures_remaining += lectures
            entry.labs_remaining += labs
        return entry

    def for_class(self, class_name: str, division: str) -> List[LedgerEntry]:
        return self._by_class.get((class_name, division), [])

    def get(self, key: DemandKey) -> LedgerEntry | None:
        return self.entries.get(key)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries.values())

    @property
    def placed_sessions(self) -> int:
        return sum(e.lectures_placed + e.labs_placed for e in self.entries.values())

    @property
    def remaining_sessions(self) -> int:
        return sum(e.lectures_remaining + e.labs_remaining for e in self.entries.values())
