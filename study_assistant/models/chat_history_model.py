from __future__ import annotations

import enum

from sqlalchemy import BigInteger, Enum as EnumSQL, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from study_assistant.db.base_class import Base


class ChatSender(str, enum.Enum):
    """Author of a message in a course conversation."""

    USER = "user"
    AI = "ai"


class ChatHistoryEntry(Base):
    """One append-only message of a course conversation."""

    __tablename__ = "chat_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[str] = mapped_column(String, ForeignKey("courses.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False)
    sender: Mapped[ChatSender] = mapped_column(
        EnumSQL(ChatSender, name="chat_sender", values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
