from __future__ import annotations

import logging

from sqlalchemy import delete, func
from sqlalchemy.exc import SQLAlchemyError

from study_assistant.db.session import LocalStore
from study_assistant.models.chat_history_model import ChatHistoryEntry
from study_assistant.models.course_model import Course
from study_assistant.models.course_progress_model import CourseProgressRecord
from study_assistant.schemas.stats_schema import DatabaseStats

logger = logging.getLogger(__name__)


def get_database_stats(store: LocalStore) -> DatabaseStats:
    with store.session() as db:
        try:
            total_courses = db.query(func.count(Course.id)).scalar() or 0
            total_messages = db.query(func.count(ChatHistoryEntry.id)).scalar() or 0
        except SQLAlchemyError:
            logger.exception("Lecture des statistiques échouée")
            return DatabaseStats()

    return DatabaseStats(
        total_courses=int(total_courses),
        total_messages=int(total_messages),
        database_size=store.persisted_size(),
    )


def clear_database(store: LocalStore) -> None:
    """Remove every course, progress record and chat message. Users are kept."""

    store.run(
        delete(ChatHistoryEntry),
        delete(CourseProgressRecord),
        delete(Course),
    )
    logger.info("Base locale vidée.")
