from __future__ import annotations
from typing import List
import logging

from smart_scheduler.config import Settings
from smart_scheduler.schemas import ScheduleConfig
from smart_scheduler.engine.emitter import FREE_SUBJECT, RECESS_SUBJECT, SENTINEL_TEACHERS
from smart_scheduler.engine.slots import ScheduleConfigError


logger = logging.getLogger(__name__)


def collect_problems(config: ScheduleConfig, settings: Settings) -> List[str]:
    problems: List[str] = []

    if not config.classes:
        problems.append("At least one class is required")
    if config.lecture_count > settings.max_lecture_count:
        problems.append(f"lecture_count {config.lecture_count} exceeds the limit of {settings.max_lecture_count}")
    if len(config.teachers) > settings.max_assignments:
        problems.append(f"{len(config.teachers)} assignments exceed the limit of {settings.max_assignments}")
    if len(config.classes) > settings.max_classes:
        problems.append(f"{len(config.classes)} classes exceed the limit of {settings.max_classes}")

    roster = set()
    for idx, cls in enumerate(config.classes):
        if not cls.name.strip() or not cls.division.strip():
            problems.append(f"Class #{idx + 1} needs both a name and a division")
            continue
        key = (cls.name, cls.division)
        if key in roster:
            problems.append(f"Class {cls.name}-{cls.division} is listed more than once")
        roster.add(key)

    for idx, t in enumerate(config.teachers):
        label = f"Assignment #{idx + 1}"
        if not all(v.strip() for v in (t.name, t.subject, t.target_class, t.target_division)):
            problems.append(f"{label} needs a teacher, subject, class and division")
            continue
        if t.name in SENTINEL_TEACHERS:
            problems.append(f"{label} uses the reserved teacher name {t.name!r}")
        if t.subject in (RECESS_SUBJECT, FREE_SUBJECT):
            problems.append(f"{label} uses the reserved subject name {t.subject!r}")
        if (t.target_class, t.target_division) not in roster:
            problems.append(f"{label} ({t.name}, {t.subject}) targets unknown class {t.target_class}-{t.target_division}")
    return problems


def validate_config(config: ScheduleConfig, settings: Settings) -> None:
    """Reject configurations the allocator would silently mis-handle."""
    problems = collect_problems(config, settings)
    if problems:
        logger.warning("Rejected schedule configuration: %s", "; ".join(problems))
        raise ScheduleConfigError("; ".join(problems))
