"""Tasks, subjects and goals kept outside the relational database.

Each list is a JSON document in a :class:`BlobStore` under its own key, so the
study state survives independently of the course database. Every mutation
writes the affected list back immediately.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Callable, List, Mapping, Sequence, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from study_assistant.core.errors import InvalidArgumentError, StorageError
from study_assistant.core.events import CourseSaved
from study_assistant.db.blob_store import BlobStore
from study_assistant.schemas.study_schema import (
    Goal,
    GoalUpdate,
    Subject,
    SubjectUpdate,
    Task,
    TaskUpdate,
)
from study_assistant.utils.ids import new_identifier

logger = logging.getLogger(__name__)

TASKS_KEY = "ai-study-tasks"
SUBJECTS_KEY = "ai-study-subjects"
GOALS_KEY = "ai-study-goals"

_TASKS = TypeAdapter(List[Task])
_SUBJECTS = TypeAdapter(List[Subject])
_GOALS = TypeAdapter(List[Goal])

ItemT = TypeVar("ItemT", bound=BaseModel)
UpdateT = Union[BaseModel, Mapping[str, object]]


def subject_id_for_course(course_id: str) -> str:
    return f"subj-{course_id}"


def task_id_for_module(course_id: str, module_index: int) -> str:
    return f"task-{course_id}-{module_index}"


def _update_fields(updates: UpdateT) -> dict:
    if isinstance(updates, BaseModel):
        return updates.model_dump(exclude_unset=True, exclude_none=True)
    return dict(updates)


class StudyStateStore:
    """User-curated study artifacts with synchronous CRUD."""

    def __init__(self, blob_store: BlobStore, *, today: Callable[[], date] = date.today):
        self.blob_store = blob_store
        self._today = today
        self.tasks: list[Task] = self._load(TASKS_KEY, _TASKS)
        self.subjects: list[Subject] = self._load(SUBJECTS_KEY, _SUBJECTS)
        self.goals: list[Goal] = self._load(GOALS_KEY, _GOALS)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self, key: str, adapter: TypeAdapter) -> list:
        try:
            raw = self.blob_store.get(key)
        except OSError:
            logger.exception("Lecture de '%s' échouée, liste vide utilisée.", key)
            return []
        if not raw:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError:
            logger.warning("Contenu invalide pour '%s', liste vide utilisée.", key)
            return []

    def _save(self, key: str, adapter: TypeAdapter, items: Sequence[BaseModel]) -> None:
        try:
            self.blob_store.put(key, adapter.dump_json(list(items), by_alias=True))
        except OSError as exc:
            logger.error("Écriture de '%s' échouée: %s", key, exc)
            raise StorageError(f"Failed to persist {key}") from exc

    def _save_tasks(self) -> None:
        self._save(TASKS_KEY, _TASKS, self.tasks)

    def _save_subjects(self) -> None:
        self._save(SUBJECTS_KEY, _SUBJECTS, self.subjects)

    def _save_goals(self) -> None:
        self._save(GOALS_KEY, _GOALS, self.goals)

    @staticmethod
    def _apply_update(items: list[ItemT], item_id: str, updates: UpdateT) -> ItemT | None:
        for index, item in enumerate(items):
            if item.id == item_id:
                fields = _update_fields(updates)
                fields.pop("id", None)
                try:
                    merged = type(item).model_validate({**item.model_dump(), **fields})
                except ValidationError as exc:
                    raise InvalidArgumentError(str(exc)) from exc
                items[index] = merged
                return merged
        return None

    @staticmethod
    def _remove(items: list[ItemT], item_id: str) -> bool:
        for index, item in enumerate(items):
            if item.id == item_id:
                del items[index]
                return True
        return False

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------
    def add_task(self, text: str, due_date: date) -> Task:
        task = Task(id=new_identifier(), text=text, completed=False, due_date=due_date)
        self.tasks.append(task)
        self._save_tasks()
        return task

    def update_task(self, task_id: str, updates: TaskUpdate | Mapping[str, object]) -> Task | None:
        task = self._apply_update(self.tasks, task_id, updates)
        if task is not None:
            self._save_tasks()
        return task

    def delete_task(self, task_id: str) -> bool:
        removed = self._remove(self.tasks, task_id)
        if removed:
            self._save_tasks()
        return removed

    # ------------------------------------------------------------------
    # Subjects
    # ------------------------------------------------------------------
    def add_subject(self, name: str) -> Subject:
        subject = Subject(id=new_identifier(), name=name, progress=0)
        self.subjects.append(subject)
        self._save_subjects()
        return subject

    def update_subject(self, subject_id: str, updates: SubjectUpdate | Mapping[str, object]) -> Subject | None:
        subject = self._apply_update(self.subjects, subject_id, updates)
        if subject is not None:
            self._save_subjects()
        return subject

    def delete_subject(self, subject_id: str) -> bool:
        removed = self._remove(self.subjects, subject_id)
        if removed:
            self._save_subjects()
        return removed

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------
    def add_goal(self, text: str) -> Goal:
        goal = Goal(id=new_identifier(), text=text, achieved=False)
        self.goals.append(goal)
        self._save_goals()
        return goal

    def update_goal(self, goal_id: str, updates: GoalUpdate | Mapping[str, object]) -> Goal | None:
        goal = self._apply_update(self.goals, goal_id, updates)
        if goal is not None:
            self._save_goals()
        return goal

    def delete_goal(self, goal_id: str) -> bool:
        removed = self._remove(self.goals, goal_id)
        if removed:
            self._save_goals()
        return removed

    # ------------------------------------------------------------------
    # Course integration
    # ------------------------------------------------------------------
    def on_course_saved(self, event: CourseSaved) -> None:
        """Create the course's subject and one study task per module.

        Identifiers derive from the course id, so saving the same course again
        finds them already present and adds nothing.
        """

        subject_id = subject_id_for_course(event.course_id)
        if not any(subject.id == subject_id for subject in self.subjects):
            self.subjects.append(Subject(id=subject_id, name=event.title, progress=0))
            self._save_subjects()
            logger.info("Matière créée pour le cours %s", event.course_id)

        existing_task_ids = {task.id for task in self.tasks}
        today = self._today()
        new_tasks = []
        for index, module_title in enumerate(event.module_titles):
            task_id = task_id_for_module(event.course_id, index)
            if task_id in existing_task_ids:
                continue
            new_tasks.append(
                Task(
                    id=task_id,
                    text=f"Study Module {index + 1}: {module_title}",
                    completed=False,
                    due_date=today + timedelta(days=index + 1),
                )
            )

        if new_tasks:
            self.tasks.extend(new_tasks)
            self._save_tasks()
            logger.info("%s tâche(s) créée(s) pour le cours %s", len(new_tasks), event.course_id)
