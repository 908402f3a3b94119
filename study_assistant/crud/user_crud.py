"""Persistence helpers for the local user profile."""

from __future__ import annotations

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError

from study_assistant.db.session import LocalStore
from study_assistant.models.chat_history_model import ChatHistoryEntry
from study_assistant.models.course_model import Course
from study_assistant.models.course_progress_model import CourseProgressRecord
from study_assistant.models.user_model import User
from study_assistant.schemas.user_schema import UserProfile
from study_assistant.utils.ids import new_identifier, now_ms

logger = logging.getLogger(__name__)


def generate_user_id() -> str:
    return new_identifier("user")


def _to_profile(user: User) -> UserProfile:
    return UserProfile(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


def save_user(store: LocalStore, profile: UserProfile) -> UserProfile:
    """Insert or replace the user row keyed by ``profile.id``."""

    with store.session() as db:
        db.merge(
            User(
                id=profile.id,
                name=profile.name,
                email=profile.email,
                created_at=profile.created_at,
            )
        )
        store.commit(db)
    logger.info("Utilisateur enregistré: %s", profile.id)
    return profile


def get_current_user(store: LocalStore) -> UserProfile | None:
    """Return the first user of the local database (single-user deployment)."""

    with store.session() as db:
        try:
            user = db.query(User).order_by(User.created_at.asc(), User.id.asc()).first()
        except SQLAlchemyError:
            logger.exception("Lecture de l'utilisateur courant échouée")
            return None
        return _to_profile(user) if user else None


def get_user_by_id(store: LocalStore, user_id: str) -> UserProfile | None:
    with store.session() as db:
        try:
            user = db.get(User, user_id)
        except SQLAlchemyError:
            logger.exception("Lecture de l'utilisateur %s échouée", user_id)
            return None
        return _to_profile(user) if user else None


def ensure_default_user(store: LocalStore, *, name: str, email: str) -> UserProfile:
    """Create the local user on first launch, otherwise return the existing one."""

    existing = get_current_user(store)
    if existing is not None:
        logger.info("Utilisateur local déjà présent: %s", existing.id)
        return existing

    profile = UserProfile(id=generate_user_id(), name=name, email=email, created_at=now_ms())
    logger.info("Création de l'utilisateur local '%s'.", email)
    return save_user(store, profile)


def delete_user(store: LocalStore, user_id: str) -> None:
    """Delete a user with their courses, progress records and chat history."""

    owned_courses = select(Course.id).where(Course.user_id == user_id)
    store.run(
        delete(ChatHistoryEntry).where(
            or_(ChatHistoryEntry.user_id == user_id, ChatHistoryEntry.course_id.in_(owned_courses))
        ),
        delete(CourseProgressRecord).where(
            or_(CourseProgressRecord.user_id == user_id, CourseProgressRecord.course_id.in_(owned_courses))
        ),
        delete(Course).where(Course.user_id == user_id),
        delete(User).where(User.id == user_id),
    )
    logger.info("Utilisateur supprimé: %s", user_id)
