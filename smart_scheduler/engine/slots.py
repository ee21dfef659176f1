from __future__ import annotations
from dataclasses import dataclass
from typing import List


MINUTES_PER_DAY = 24 * 60


class ScheduleConfigError(ValueError):
    """Raised when a configuration cannot produce a sensible slot grid."""


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str
    is_break: bool = False


def parse_hhmm(value: str) -> int:
    try:
        hours, minutes = value.split(":")
        total = int(hours) * 60 + int(minutes)
    except ValueError:
        raise ScheduleConfigError(f"Invalid time {value!r}, expected HH:MM") from None
    if not (0 <= int(hours) < 24 and 0 <= int(minutes) < 60):
        raise ScheduleConfigError(f"Invalid time {value!r}, expected HH:MM")
    return total


def format_hhmm(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def build_time_slots(
    start_time: str,
    lecture_duration: int,
    lecture_count: int,
    break_after: int,
    break_duration: int,
) -> List[TimeSlot]:
    """Expand the daily bell configuration into an ordered slot sequence.

    The result holds ``lecture_count`` regular periods and one recess slot
    placed right after period ``break_after``. A ``break_after`` at or beyond
    the last period puts the recess at the end of the day.
    """
    if lecture_duration <= 0:
        raise ScheduleConfigError("lecture_duration must be positive")
    if lecture_count <= 0:
        raise ScheduleConfigError("lecture_count must be positive")
    if break_after < 1:
        raise ScheduleConfigError("break_after must be at least 1")
    if break_duration < 0:
        raise ScheduleConfigError("break_duration must not be negative")

    current = parse_hhmm(start_time)
    day_end = current + lecture_duration * lecture_count + break_duration
    if day_end >= MINUTES_PER_DAY:
        raise ScheduleConfigError(f"School day starting at {start_time} would run past midnight")

    break_position = min(break_after, lecture_count)
    slots: List[TimeSlot] = []
    for period in range(1, lecture_count + 1):
        start = current
        current += lecture_duration
        slots.append(TimeSlot(format_hhmm(start), format_hhmm(current), False))
        if period == break_position:
            start = current
            current += break_duration
            slots.append(TimeSlot(format_hhmm(start), format_hhmm(current), True))
    return slots
