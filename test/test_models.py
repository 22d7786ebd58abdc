from datetime import date, datetime

from task_planner.models import (
    HardCommitment,
    Inference,
    InferredTask,
    PlanningRequest,
    PlanningSettings,
    StructuredTask,
)

def test_task_defaults():
    t = StructuredTask(title="  Test  ")
    assert t.title == "Test"
    assert t.id.startswith("task-")
    assert t.priority is None and t.duration is None and t.deadline is None
    assert t.dependencies == []

def test_task_ids_are_unique():
    ids = {StructuredTask(title="X").id for _ in range(50)}
    assert len(ids) == 50

def test_dependencies_keep_first_occurrence_order():
    t = StructuredTask(title="X", dependencies=["b", "a", "b", "c", "a"])
    assert t.dependencies == ["b", "a", "c"]

def test_inferred_task_from_structured_keeps_fields():
    base = StructuredTask(id="t1", title="Write docs", priority=2, notes="n")
    inferred = InferredTask.from_structured(
        base,
        inferences={"duration": Inference(value=60, confidence="low", rationale="default")},
        conditional_hints=["hint"],
    )
    assert inferred.id == "t1"
    assert inferred.priority == 2
    assert inferred.notes == "n"
    assert inferred.inferences["duration"].value == 60
    assert inferred.conditional_hints == ["hint"]

def test_planning_settings_defaults():
    s = PlanningSettings()
    assert s.working_hours.start == "09:00"
    assert s.working_hours.end == "17:00"
    assert s.weekends_enabled is False
    assert s.focus_block_length == 120
    assert s.break_buffer == 15
    assert s.hard_commitments == []
    assert s.working_hours.start_time.hour == 9

def test_hard_commitment():
    c = HardCommitment(
        title="Standup",
        start_time=datetime(2026, 3, 2, 9, 30),
        end_time=datetime(2026, 3, 2, 9, 45),
    )
    assert c.start_time < c.end_time

def test_planning_request_structured_from_dicts():
    r = PlanningRequest(tasks=[{"title": "A"}, {"title": "B", "priority": 5}], input_method="structured")
    assert [t.title for t in r.tasks] == ["A", "B"]
    assert r.tasks[1].priority == 5

def test_planning_request_freeform():
    r = PlanningRequest(tasks="call mom\nbuy milk", input_method="freeform", plan_date=date(2026, 3, 2))
    assert isinstance(r.tasks, str)
    assert r.plan_date == date(2026, 3, 2)
