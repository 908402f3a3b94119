"""Course repository.

Each course is stored as one row: the full document serialised to JSON in
``data`` plus ``title``/``introduction``/``timestamp`` copied into their own
columns for listing and search. Progress is never part of the stored document.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from study_assistant.core.errors import StorageError
from study_assistant.core.events import CourseSaved, EventBus
from study_assistant.crud import progress_crud
from study_assistant.db.session import LocalStore
from study_assistant.models.chat_history_model import ChatHistoryEntry
from study_assistant.models.course_model import Course
from study_assistant.models.course_progress_model import CourseProgressRecord
from study_assistant.schemas.course_schema import CourseDocument
from study_assistant.utils.ids import new_identifier, now_ms

logger = logging.getLogger(__name__)


def generate_course_id() -> str:
    return new_identifier("course")


def _decode(row_data: str) -> CourseDocument:
    return CourseDocument.model_validate_json(row_data)


def _find_by_title(db: Session, user_id: str, title: str) -> Course | None:
    return (
        db.query(Course)
        .filter(Course.user_id == user_id, Course.title == title)
        .order_by(Course.timestamp.desc())
        .first()
    )


def save_course(
    store: LocalStore,
    course: CourseDocument,
    user_id: str,
    *,
    events: EventBus | None = None,
) -> CourseDocument:
    """Insert or replace a course and return the stored document.

    A course arriving without an id whose title matches one of the user's
    saved courses is treated as a repeated save of that course: nothing is
    written and the stored document is returned.
    """

    with store.session() as db:
        try:
            duplicate = _find_by_title(db, user_id, course.title) if course.id is None else None
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError("Failed to look up existing courses") from exc
        if duplicate is not None:
            logger.info("Cours '%s' déjà enregistré (%s), sauvegarde ignorée.", course.title, duplicate.id)
            return _decode(duplicate.data)

        document = course.model_copy(
            update={
                "id": course.id or generate_course_id(),
                "timestamp": course.timestamp or now_ms(),
                "progress": None,
            }
        )
        try:
            db.merge(
                Course(
                    id=document.id,
                    user_id=user_id,
                    title=document.title,
                    introduction=document.introduction or "",
                    timestamp=document.timestamp,
                    data=document.to_storage_json(),
                )
            )
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError("Failed to prepare the course row") from exc
        store.commit(db)

    logger.info("Cours enregistré: %s", document.id)
    if events is not None:
        events.publish(CourseSaved.from_course(document))
    return document


def get_all_courses(store: LocalStore) -> list[CourseDocument]:
    with store.session() as db:
        try:
            rows = db.query(Course.data).order_by(Course.timestamp.desc()).all()
            return [_decode(data) for (data,) in rows]
        except (SQLAlchemyError, ValidationError):
            logger.exception("Lecture des cours échouée")
            return []


def get_courses_by_user_id(store: LocalStore, user_id: str) -> list[CourseDocument]:
    """Return the user's courses, newest first, with their progress attached."""

    with store.session() as db:
        try:
            rows = (
                db.query(Course.id, Course.data)
                .filter(Course.user_id == user_id)
                .order_by(Course.timestamp.desc())
                .all()
            )
            courses: list[CourseDocument] = []
            for course_id, data in rows:
                document = _decode(data)
                document.progress = progress_crud.get_course_progress_in_session(db, course_id, user_id)
                courses.append(document)
            return courses
        except (SQLAlchemyError, ValidationError):
            logger.exception("Lecture des cours de l'utilisateur %s échouée", user_id)
            return []


def get_course(store: LocalStore, course_id: str) -> CourseDocument | None:
    with store.session() as db:
        try:
            data = db.query(Course.data).filter(Course.id == course_id).scalar()
            return _decode(data) if data is not None else None
        except (SQLAlchemyError, ValidationError):
            logger.exception("Lecture du cours %s échouée", course_id)
            return None


def get_course_owner(store: LocalStore, course_id: str) -> str | None:
    with store.session() as db:
        try:
            return db.query(Course.user_id).filter(Course.id == course_id).scalar()
        except SQLAlchemyError:
            logger.exception("Lecture du propriétaire du cours %s échouée", course_id)
            return None


def delete_course(store: LocalStore, course_id: str) -> None:
    """Delete a course together with its progress records and chat history."""

    store.run(
        delete(ChatHistoryEntry).where(ChatHistoryEntry.course_id == course_id),
        delete(CourseProgressRecord).where(CourseProgressRecord.course_id == course_id),
        delete(Course).where(Course.id == course_id),
    )
    logger.info("Cours supprimé: %s", course_id)


def search_courses(store: LocalStore, query: str, user_id: str) -> list[CourseDocument]:
    """Case-insensitive substring search over title and introduction."""

    with store.session() as db:
        try:
            rows = (
                db.query(Course.data)
                .filter(Course.user_id == user_id)
                .filter(
                    Course.title.icontains(query, autoescape=True)
                    | Course.introduction.icontains(query, autoescape=True)
                )
                .order_by(Course.timestamp.desc())
                .all()
            )
            return [_decode(data) for (data,) in rows]
        except (SQLAlchemyError, ValidationError):
            logger.exception("Recherche de cours échouée (query=%r)", query)
            return []
