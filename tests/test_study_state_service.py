from __future__ import annotations

import json
from datetime import date

import pytest

from study_assistant.core.errors import InvalidArgumentError, StorageError
from study_assistant.core.events import CourseSaved
from study_assistant.crud import course_crud
from study_assistant.schemas.study_schema import SubjectUpdate, TaskUpdate
from study_assistant.services.study_state_service import (
    GOALS_KEY,
    SUBJECTS_KEY,
    TASKS_KEY,
    StudyStateStore,
)
from tests.utils import FIXED_TODAY, create_user, make_course


def test_course_saved_creates_subject_and_module_tasks(study_state, state_blob_store):
    study_state.on_course_saved(CourseSaved(course_id="c1", title="Intro to Python", module_titles=("Basics", "Functions")))

    assert [(s.id, s.name, s.progress) for s in study_state.subjects] == [("subj-c1", "Intro to Python", 0)]
    assert [(t.id, t.text, t.completed, t.due_date) for t in study_state.tasks] == [
        ("task-c1-0", "Study Module 1: Basics", False, date(2024, 3, 2)),
        ("task-c1-1", "Study Module 2: Functions", False, date(2024, 3, 3)),
    ]

    stored_tasks = json.loads(state_blob_store.get(TASKS_KEY))
    assert stored_tasks[0] == {
        "id": "task-c1-0",
        "text": "Study Module 1: Basics",
        "completed": False,
        "dueDate": "2024-03-02",
    }
    assert json.loads(state_blob_store.get(SUBJECTS_KEY))[0]["id"] == "subj-c1"


def test_saving_same_course_twice_adds_nothing(store, events, study_state):
    create_user(store)
    course = course_crud.save_course(store, make_course(id="c1"), "u1", events=events)
    course_crud.save_course(store, course, "u1", events=events)

    assert len(study_state.subjects) == 1
    assert len(study_state.tasks) == 2


def test_new_modules_add_only_missing_tasks(study_state):
    study_state.on_course_saved(CourseSaved("c1", "Course", ("A",)))
    study_state.update_task("task-c1-0", TaskUpdate(completed=True))
    study_state.on_course_saved(CourseSaved("c1", "Course", ("A", "B")))

    assert [(t.id, t.completed) for t in study_state.tasks] == [("task-c1-0", True), ("task-c1-1", False)]


def test_state_is_reloaded_from_blob_store(study_state, state_blob_store):
    study_state.add_goal("Finish the Python course")
    study_state.on_course_saved(CourseSaved("c1", "Course", ("A",)))

    reloaded = StudyStateStore(state_blob_store, today=lambda: FIXED_TODAY)
    assert [g.text for g in reloaded.goals] == ["Finish the Python course"]
    assert [t.id for t in reloaded.tasks] == ["task-c1-0"]
    assert [s.id for s in reloaded.subjects] == ["subj-c1"]


def test_invalid_stored_json_starts_empty(state_blob_store):
    state_blob_store.put(TASKS_KEY, b"{not json")
    state_blob_store.put(GOALS_KEY, b'[{"id": "g1"}]')

    state = StudyStateStore(state_blob_store)
    assert state.tasks == []
    assert state.goals == []


def test_task_crud(study_state):
    task = study_state.add_task("Read chapter 1", date(2024, 3, 10))
    assert task.completed is False

    updated = study_state.update_task(task.id, {"completed": True})
    assert updated.completed is True
    assert updated.text == "Read chapter 1"

    assert study_state.update_task("missing", {"completed": True}) is None
    assert study_state.delete_task(task.id) is True
    assert study_state.delete_task(task.id) is False
    assert study_state.tasks == []


def test_subject_crud(study_state):
    subject = study_state.add_subject("Mathematics")
    assert subject.progress == 0

    updated = study_state.update_subject(subject.id, SubjectUpdate(progress=40))
    assert (updated.name, updated.progress) == ("Mathematics", 40)

    with pytest.raises(InvalidArgumentError):
        study_state.update_subject(subject.id, {"progress": 150})
    assert study_state.subjects[0].progress == 40

    assert study_state.delete_subject(subject.id) is True


def test_goal_crud(study_state):
    goal = study_state.add_goal("Learn SQL")
    updated = study_state.update_goal(goal.id, {"achieved": True, "id": "hijacked"})

    assert updated.id == goal.id
    assert updated.achieved is True
    assert study_state.delete_goal(goal.id) is True
    assert study_state.goals == []


def test_write_failure_raises_storage_error(study_state, state_blob_store, monkeypatch):
    def broken_put(key, data):
        raise OSError("read-only")

    monkeypatch.setattr(state_blob_store, "put", broken_put)
    with pytest.raises(StorageError):
        study_state.add_goal("Never saved")
