from fastapi import FastAPI, HTTPException
from typing import Dict, List, Optional
import logging

from smart_scheduler.config import get_settings
from smart_scheduler.schemas import (
    GenerateRequest,
    ScheduleResponse,
)
from smart_scheduler.services.schedule_service import ScheduleService

settings = get_settings()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Smart Scheduler Backend")

service = ScheduleService(settings)


def _not_found(value):
    if value is None:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return value


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/generate", response_model=ScheduleResponse)
def generate_schedule(payload: GenerateRequest):
    try:
        return service.generate(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/schedule/{schedule_id}", response_model=ScheduleResponse)
def get_schedule(schedule_id: str):
    return _not_found(service.get_schedule(schedule_id))


@app.get("/schedule/{schedule_id}/class/{class_name}/{division}", response_model=List[Dict[str, str]])
def get_class_grid(schedule_id: str, class_name: str, division: str):
    return _not_found(service.class_view(schedule_id, class_name, division))


@app.get("/schedule/{schedule_id}/teachers", response_model=List[str])
def list_teachers(schedule_id: str, q: Optional[str] = None):
    return _not_found(service.teachers(schedule_id, q))


@app.get("/schedule/{schedule_id}/teacher/{teacher_name}", response_model=List[Dict[str, str]])
def get_teacher_duty(schedule_id: str, teacher_name: str):
    return _not_found(service.teacher_view(schedule_id, teacher_name))
