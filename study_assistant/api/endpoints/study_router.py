"""Tâches, matières et objectifs de l'espace d'étude."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from study_assistant.api.dependencies import get_study_state
from study_assistant.schemas.study_schema import (
    Goal,
    GoalCreate,
    GoalUpdate,
    Subject,
    SubjectCreate,
    SubjectUpdate,
    Task,
    TaskCreate,
    TaskUpdate,
)
from study_assistant.services.study_state_service import StudyStateStore

router = APIRouter()


def _not_found(kind: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind}_not_found")


# --- Tasks ---
@router.get("/tasks", response_model=List[Task])
def list_tasks(study_state: StudyStateStore = Depends(get_study_state)) -> List[Task]:
    return list(study_state.tasks)


@router.post("/tasks", response_model=Task, status_code=status.HTTP_201_CREATED)
def create_task(payload: TaskCreate, study_state: StudyStateStore = Depends(get_study_state)) -> Task:
    return study_state.add_task(payload.text, payload.due_date)


@router.patch("/tasks/{task_id}", response_model=Task)
def update_task(
    task_id: str,
    payload: TaskUpdate,
    study_state: StudyStateStore = Depends(get_study_state),
) -> Task:
    task = study_state.update_task(task_id, payload)
    if task is None:
        raise _not_found("task")
    return task


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, study_state: StudyStateStore = Depends(get_study_state)) -> None:
    if not study_state.delete_task(task_id):
        raise _not_found("task")


# --- Subjects ---
@router.get("/subjects", response_model=List[Subject])
def list_subjects(study_state: StudyStateStore = Depends(get_study_state)) -> List[Subject]:
    return list(study_state.subjects)


@router.post("/subjects", response_model=Subject, status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectCreate, study_state: StudyStateStore = Depends(get_study_state)) -> Subject:
    return study_state.add_subject(payload.name)


@router.patch("/subjects/{subject_id}", response_model=Subject)
def update_subject(
    subject_id: str,
    payload: SubjectUpdate,
    study_state: StudyStateStore = Depends(get_study_state),
) -> Subject:
    subject = study_state.update_subject(subject_id, payload)
    if subject is None:
        raise _not_found("subject")
    return subject


@router.delete("/subjects/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject(subject_id: str, study_state: StudyStateStore = Depends(get_study_state)) -> None:
    if not study_state.delete_subject(subject_id):
        raise _not_found("subject")


# --- Goals ---
@router.get("/goals", response_model=List[Goal])
def list_goals(study_state: StudyStateStore = Depends(get_study_state)) -> List[Goal]:
    return list(study_state.goals)


@router.post("/goals", response_model=Goal, status_code=status.HTTP_201_CREATED)
def create_goal(payload: GoalCreate, study_state: StudyStateStore = Depends(get_study_state)) -> Goal:
    return study_state.add_goal(payload.text)


@router.patch("/goals/{goal_id}", response_model=Goal)
def update_goal(
    goal_id: str,
    payload: GoalUpdate,
    study_state: StudyStateStore = Depends(get_study_state),
) -> Goal:
    goal = study_state.update_goal(goal_id, payload)
    if goal is None:
        raise _not_found("goal")
    return goal


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(goal_id: str, study_state: StudyStateStore = Depends(get_study_state)) -> None:
    if not study_state.delete_goal(goal_id):
        raise _not_found("goal")
