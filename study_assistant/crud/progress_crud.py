"""Course completion tracking.

Records are unique per ``(course_id, user_id)``. Updates go through the
``version`` counter of :class:`CourseProgressRecord`, so two interleaved
read-modify-write sequences cannot silently drop a completion: the loser gets
a :class:`ConcurrentUpdateError` from the store and the tracker retries on a
fresh read.
"""

from __future__ import annotations

import logging

from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from study_assistant.core.config import settings
from study_assistant.core.errors import ConcurrentUpdateError, InvalidArgumentError, StorageError
from study_assistant.db.session import LocalStore
from study_assistant.models.course_progress_model import CourseProgressRecord
from study_assistant.schemas.progress_schema import CompletedSection, CourseProgress
from study_assistant.utils.ids import now_ms

logger = logging.getLogger(__name__)


def to_schema(record: CourseProgressRecord) -> CourseProgress:
    return CourseProgress(
        course_id=record.course_id,
        user_id=record.user_id,
        completed_modules=list(record.completed_modules or []),
        completed_sections=[CompletedSection.model_validate(item) for item in record.completed_sections or []],
        last_accessed_at=record.last_accessed_at,
        progress_percentage=record.progress_percentage or 0.0,
    )


def _dump_sections(sections: list[CompletedSection]) -> list[dict]:
    return [section.model_dump(by_alias=True) for section in sections]


def _load_record(db: Session, course_id: str, user_id: str) -> CourseProgressRecord | None:
    return (
        db.query(CourseProgressRecord)
        .filter(
            CourseProgressRecord.course_id == course_id,
            CourseProgressRecord.user_id == user_id,
        )
        .first()
    )


def _ensure_record(db: Session, course_id: str, user_id: str) -> CourseProgressRecord:
    """Insert a zeroed record unless one exists, then load it.

    ``ON CONFLICT DO NOTHING`` keeps the unique constraint from failing when
    another writer created the record first.
    """

    db.execute(
        sqlite_insert(CourseProgressRecord)
        .values(
            course_id=course_id,
            user_id=user_id,
            completed_modules=[],
            completed_sections=[],
            last_accessed_at=now_ms(),
            progress_percentage=0.0,
            version=1,
        )
        .on_conflict_do_nothing(index_elements=["course_id", "user_id"])
    )
    record = _load_record(db, course_id, user_id)
    assert record is not None
    return record


def compute_percentage(completed: int, total_sections: int) -> float:
    if total_sections <= 0:
        raise InvalidArgumentError("total_sections must be greater than zero")
    return completed / total_sections * 100


def get_course_progress_in_session(db: Session, course_id: str, user_id: str) -> CourseProgress | None:
    record = _load_record(db, course_id, user_id)
    return to_schema(record) if record else None


def get_course_progress(store: LocalStore, course_id: str, user_id: str) -> CourseProgress | None:
    with store.session() as db:
        try:
            return get_course_progress_in_session(db, course_id, user_id)
        except SQLAlchemyError:
            logger.exception("Lecture de la progression échouée (course=%s, user=%s)", course_id, user_id)
            return None


def save_course_progress(store: LocalStore, progress: CourseProgress) -> CourseProgress:
    """Insert or replace the record for ``(progress.course_id, progress.user_id)``."""

    with store.session() as db:
        try:
            record = _ensure_record(db, progress.course_id, progress.user_id)
        except SQLAlchemyError as exc:
            db.rollback()
            raise StorageError("Failed to prepare the progress record") from exc

        record.completed_modules = list(progress.completed_modules)
        record.completed_sections = _dump_sections(progress.completed_sections)
        record.last_accessed_at = progress.last_accessed_at
        record.progress_percentage = progress.progress_percentage
        store.commit(db)
        saved = to_schema(record)

    logger.info("Progression enregistrée pour le cours %s", progress.course_id)
    return saved


def mark_section_completed(
    store: LocalStore,
    course_id: str,
    user_id: str,
    module_index: int,
    section_index: int,
    total_sections: int,
) -> CourseProgress:
    """Record one completed section and recompute the percentage.

    Completing a section that is already recorded changes nothing. The caller
    provides ``total_sections``; it is not checked against the course.
    """

    if total_sections <= 0:
        raise InvalidArgumentError("total_sections must be greater than zero")
    if module_index < 0 or section_index < 0:
        raise InvalidArgumentError("module_index and section_index must be non-negative")

    target = CompletedSection(module_index=module_index, section_index=section_index)
    attempts = settings.PROGRESS_UPDATE_MAX_ATTEMPTS

    for attempt in range(1, attempts + 1):
        with store.session() as db:
            try:
                record = _ensure_record(db, course_id, user_id)
            except SQLAlchemyError as exc:
                db.rollback()
                raise StorageError("Failed to load the progress record") from exc

            current = to_schema(record)
            if target in current.completed_sections:
                logger.debug(
                    "Section (%s, %s) déjà terminée pour le cours %s", module_index, section_index, course_id
                )
                db.rollback()
                return current

            sections = current.completed_sections + [target]
            record.completed_sections = _dump_sections(sections)
            record.progress_percentage = compute_percentage(len(sections), total_sections)
            record.last_accessed_at = now_ms()

            try:
                store.commit(db)
            except ConcurrentUpdateError:
                logger.warning(
                    "Conflit de mise à jour de la progression (course=%s, user=%s), tentative %s/%s",
                    course_id,
                    user_id,
                    attempt,
                    attempts,
                )
                continue

            return to_schema(record)

    raise ConcurrentUpdateError(
        f"Progress for course {course_id!r} kept changing after {attempts} attempts"
    )
