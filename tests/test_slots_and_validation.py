import pytest
from fastapi.testclient import TestClient

from smart_scheduler.config import Settings, get_settings
from smart_scheduler.main import app
from smart_scheduler.schemas import GenerateRequest, ScheduleConfig, TeachingAssignment
from smart_scheduler.engine.inventory import DemandKey, DemandLedger
from smart_scheduler.engine.slots import ScheduleConfigError, TimeSlot, build_time_slots
from smart_scheduler.services.schedule_service import ScheduleService
from smart_scheduler.services.validation import collect_problems, validate_config

client = TestClient(app)


def test_slot_builder_places_break_after_nth_period():
    slots = build_time_slots("08:30", 45, 2, 1, 15)
    assert slots == [
        TimeSlot("08:30", "09:15", False),
        TimeSlot("09:15", "09:30", True),
        TimeSlot("09:30", "10:15", False),
    ]


def test_slot_builder_is_deterministic():
    assert build_time_slots("07:45", 40, 7, 4, 30) == build_time_slots("07:45", 40, 7, 4, 30)


def test_slot_builder_appends_break_when_break_after_is_past_last_period():
    for break_after in (3, 9):
        slots = build_time_slots("10:00", 30, 3, break_after, 20)
        assert len(slots) == 4
        assert [s.is_break for s in slots] == [False, False, False, True]
        assert slots[-1] == TimeSlot("11:30", "11:50", True)


def test_slot_builder_has_no_gaps():
    slots = build_time_slots("08:00", 55, 8, 4, 25)
    assert len(slots) == 9
    assert sum(s.is_break for s in slots) == 1
    for prev, nxt in zip(slots, slots[1:]):
        assert prev.end == nxt.start


def test_zero_length_break_is_allowed():
    slots = build_time_slots("08:00", 60, 2, 1, 0)
    assert slots[1] == TimeSlot("09:00", "09:00", True)


@pytest.mark.parametrize(
    "args",
    [
        ("8h30", 45, 2, 1, 15),
        ("25:00", 45, 2, 1, 15),
        ("08:30", 0, 2, 1, 15),
        ("08:30", 45, 0, 1, 15),
        ("08:30", 45, 2, 0, 15),
        ("08:30", 45, 2, 1, -5),
        ("22:00", 60, 3, 1, 15),
    ],
)
def test_slot_builder_rejects_bad_configuration(args):
    with pytest.raises(ScheduleConfigError):
        build_time_slots(*args)


def test_ledger_merges_duplicate_keys_by_sum():
    ledger = DemandLedger.from_assignments([
        TeachingAssignment(name="Prof. X", subject="Math", target_class="10th", target_division="A", lectures_per_week=2, labs_per_week=1),
        TeachingAssignment(name="Prof. X", subject="Math", target_class="10th", target_division="A", lectures_per_week=3),
        TeachingAssignment(name="Prof. X", subject="Math", target_class="10th", target_division="B", lectures_per_week=1),
    ])
    assert len(ledger) == 2
    entry = ledger.get(DemandKey("Prof. X", "Math", "10th", "A"))
    assert (entry.lectures_remaining, entry.labs_remaining) == (5, 1)
    assert str(entry.key) == "Prof. X|Math|10th|A"
    assert [e.key.division for e in ledger.for_class("10th", "B")] == ["B"]
    assert ledger.for_class("9th", "A") == []


def test_ledger_entry_never_goes_negative():
    ledger = DemandLedger.from_assignments([
        TeachingAssignment(name="T", subject="Art", target_class="5th", target_division="A", lectures_per_week=1),
    ])
    entry = ledger.get(DemandKey("T", "Art", "5th", "A"))
    entry.consume_lecture()
    assert entry.lectures_placed == 1
    with pytest.raises(ValueError):
        entry.consume_lecture()
    with pytest.raises(ValueError):
        entry.consume_lab()
    assert ledger.remaining_sessions == 0


def base_config(**overrides):
    data = {
        "lecture_count": 4,
        "break_after": 2,
        "classes": [{"name": "10th", "division": "A"}],
        "teachers": [{"name": "Prof. X", "subject": "Math", "target_class": "10th", "target_division": "A", "lectures_per_week": 3}],
    }
    data.update(overrides)
    return ScheduleConfig(**data)


def test_validator_accepts_well_formed_config():
    assert collect_problems(base_config(), Settings()) == []


def test_validator_reports_every_problem():
    config = base_config(
        classes=[{"name": "10th", "division": "A"}, {"name": "10th", "division": "A"}, {"name": "", "division": "B"}],
        teachers=[
            {"name": "Prof. X", "subject": "Math", "target_class": "11th", "target_division": "A", "lectures_per_week": 3},
            {"name": "", "subject": "Art", "target_class": "10th", "target_division": "A"},
        ],
    )
    problems = collect_problems(config, Settings())
    assert len(problems) == 4
    assert any("needs both a name and a division" in p for p in problems)
    assert any("more than once" in p for p in problems)
    assert any("unknown class 11th-A" in p for p in problems)
    assert any("needs a teacher" in p for p in problems)


def test_validator_enforces_size_caps():
    settings = Settings(max_lecture_count=3, max_assignments=0, max_classes=0)
    problems = collect_problems(base_config(), settings)
    assert len(problems) == 3
    with pytest.raises(ScheduleConfigError):
        validate_config(base_config(), settings)


def test_validator_requires_classes():
    problems = collect_problems(base_config(classes=[], teachers=[]), Settings())
    assert problems == ["At least one class is required"]


def test_generate_rejects_unknown_class_with_400():
    payload = {"config": base_config(teachers=[
        {"name": "Prof. X", "subject": "Math", "target_class": "12th", "target_division": "Z", "lectures_per_week": 3},
    ]).model_dump()}
    resp = client.post("/generate", json=payload)
    assert resp.status_code == 400
    assert "12th-Z" in resp.json()["detail"]


def test_generate_rejects_bad_numbers_with_422():
    config = base_config().model_dump()
    config["lecture_duration"] = 0
    assert client.post("/generate", json={"config": config}).status_code == 422
    config = base_config().model_dump()
    config["start_time"] = "8h30"
    assert client.post("/generate", json={"config": config}).status_code == 422
    config = base_config().model_dump()
    config["teachers"][0]["labs_per_week"] = -1
    assert client.post("/generate", json={"config": config}).status_code == 422


def test_service_uses_configured_seed():
    service = ScheduleService(Settings(random_seed=123))
    request = GenerateRequest(config=base_config())
    first = service.generate(request)
    second = service.generate(request)
    assert first.seed == 123
    assert [e.subject for e in first.entries] == [e.subject for e in second.entries]
    assert service.get_schedule(first.schedule_id) is first


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("SCHEDULER_RANDOM_SEED", "99")
    monkeypatch.setenv("SCHEDULER_STRATEGY", "best_of")
    monkeypatch.setenv("SCHEDULER_MAX_LECTURE_COUNT", "10")
    monkeypatch.setenv("SCHEDULER_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.random_seed == 99
    assert settings.strategy == "best_of"
    assert settings.max_lecture_count == 10
    assert settings.log_level == "DEBUG"

    monkeypatch.setenv("SCHEDULER_MAX_CLASSES", "many")
    with pytest.raises(ValueError):
        get_settings()


def test_validator_rejects_reserved_names():
    config = base_config(teachers=[
        {"name": "N/A", "subject": "Math", "target_class": "10th", "target_division": "A", "lectures_per_week": 1},
        {"name": "Prof. X", "subject": "Free Period", "target_class": "10th", "target_division": "A", "lectures_per_week": 1},
    ])
    problems = collect_problems(config, Settings())
    assert len(problems) == 2
    assert any("reserved teacher name 'N/A'" in p for p in problems)
    assert any("reserved subject name 'Free Period'" in p for p in problems)


def test_generate_rejects_reserved_names_with_400():
    payload = {"config": base_config(teachers=[
        {"name": "None", "subject": "Recess", "target_class": "10th", "target_division": "A", "lectures_per_week": 2},
    ]).model_dump()}
    resp = client.post("/generate", json=payload)
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert "reserved teacher name 'None'" in detail
    assert "reserved subject name 'Recess'" in detail


def test_service_keeps_only_recent_schedules():
    service = ScheduleService(Settings(random_seed=1, max_stored_schedules=3))
    request = GenerateRequest(config=base_config())
    ids = [service.generate(request).schedule_id for _ in range(5)]
    assert list(service.state.schedules.keys()) == ids[2:]
    assert service.get_schedule(ids[0]) is None
    assert service.class_view(ids[1], "10th", "A") is None
    assert service.get_schedule(ids[-1]) is not None


def test_settings_reject_unknown_log_level(monkeypatch):
    monkeypatch.setenv("SCHEDULER_LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="SCHEDULER_LOG_LEVEL"):
        get_settings()
    monkeypatch.setenv("SCHEDULER_LOG_LEVEL", "warning")
    assert get_settings().log_level == "WARNING"
