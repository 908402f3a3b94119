"""Append-only chat transcripts, one conversation per (course, user)."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from study_assistant.core.errors import InvalidArgumentError
from study_assistant.db.session import LocalStore
from study_assistant.models.chat_history_model import ChatHistoryEntry, ChatSender
from study_assistant.schemas.chat_schema import ChatMessage
from study_assistant.utils.ids import now_ms

logger = logging.getLogger(__name__)


def _coerce_sender(sender: ChatSender | str) -> ChatSender:
    try:
        return ChatSender(sender)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown chat sender: {sender!r}") from exc


def save_chat_message(
    store: LocalStore,
    course_id: str,
    user_id: str,
    sender: ChatSender | str,
    message: str,
) -> ChatMessage:
    """Append a timestamped message. Earlier rows are never touched."""

    author = _coerce_sender(sender)
    with store.session() as db:
        db.add(
            ChatHistoryEntry(
                course_id=course_id,
                user_id=user_id,
                sender=author,
                message=message,
                timestamp=now_ms(),
            )
        )
        store.commit(db)
    return ChatMessage(sender=author, text=message)


def get_chat_history(store: LocalStore, course_id: str, user_id: str) -> list[ChatMessage]:
    """Return the full conversation, oldest message first.

    Messages written within the same millisecond keep their insertion order.
    """

    with store.session() as db:
        try:
            rows = (
                db.query(ChatHistoryEntry.sender, ChatHistoryEntry.message)
                .filter(
                    ChatHistoryEntry.course_id == course_id,
                    ChatHistoryEntry.user_id == user_id,
                )
                .order_by(ChatHistoryEntry.timestamp.asc(), ChatHistoryEntry.id.asc())
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Lecture de l'historique échouée (course=%s, user=%s)", course_id, user_id)
            return []

    return [ChatMessage(sender=sender, text=message) for sender, message in rows]
