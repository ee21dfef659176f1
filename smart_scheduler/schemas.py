from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field, conint, field_validator


class TeachingAssignment(BaseModel):
    name: str
    subject: str
    target_class: str
    target_division: str
    lectures_per_week: conint(ge=0) = 0
    labs_per_week: conint(ge=0) = 0


class SchoolClass(BaseModel):
    name: str
    division: str


class ScheduleConfig(BaseModel):
    start_time: str = Field(default="08:30", description="HH:MM, 24-hour")
    lecture_duration: conint(gt=0) = 45
    lecture_count: conint(gt=0) = 7
    break_after: conint(ge=1) = 4
    break_duration: conint(ge=0) = 30
    teachers: List[TeachingAssignment] = Field(default_factory=list)
    classes: List[SchoolClass] = Field(default_factory=list)

    @field_validator("start_time")
    @classmethod
    def _check_start_time(cls, value: str) -> str:
        parts = value.split(":")
        if len(parts) != 2 or not all(p.isdigit() and len(p) == 2 for p in parts):
            raise ValueError("start_time must be HH:MM")
        if int(parts[0]) > 23 or int(parts[1]) > 59:
            raise ValueError("start_time must be a valid 24-hour time")
        return value


class GenerateRequest(BaseModel):
    config: ScheduleConfig
    seed: Optional[int] = None
    strategy: Optional[str] = Field(default=None, description="greedy | best_of")


class ScheduledEntry(BaseModel):
    id: str
    day: str
    start_time: str
    end_time: str
    subject: str
    teacher_name: str
    class_name: str
    division: str
    is_break: bool = False
    is_lab: bool = False


class FulfilmentRow(BaseModel):
    teacher_name: str
    subject: str
    class_name: str
    division: str
    lectures_configured: int
    lectures_placed: int
    labs_configured: int
    labs_placed: int

    @property
    def unmet(self) -> int:
        return (self.lectures_configured - self.lectures_placed) + (self.labs_configured - self.labs_placed)


class ScheduleResponse(BaseModel):
    schedule_id: str
    strategy: str
    seed: Optional[int] = None
    entries: List[ScheduledEntry]
    fulfilment: List[FulfilmentRow]
