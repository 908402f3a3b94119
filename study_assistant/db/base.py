"""Déclare l'ensemble des modèles SQLAlchemy pour la création du schéma local."""

from study_assistant.db.base_class import Base

from study_assistant.models.user_model import User
from study_assistant.models.course_model import Course
from study_assistant.models.course_progress_model import CourseProgressRecord
from study_assistant.models.chat_history_model import ChatHistoryEntry, ChatSender

__all__ = (
    "Base",
    "User",
    "Course",
    "CourseProgressRecord",
    "ChatHistoryEntry",
    "ChatSender",
)
