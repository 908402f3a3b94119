"""Glue between the content provider and the local stores."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from study_assistant.core.content_provider import (
    ContentProviderError,
    ContinuationMode,
    CourseContentProvider,
)
from study_assistant.core.errors import InvalidArgumentError
from study_assistant.core.events import EventBus
from study_assistant.crud import chat_crud, course_crud, progress_crud
from study_assistant.db.session import LocalStore
from study_assistant.models.chat_history_model import ChatSender
from study_assistant.schemas.chat_schema import ChatMessage
from study_assistant.schemas.course_schema import CourseDocument
from study_assistant.schemas.progress_schema import CourseProgress

logger = logging.getLogger(__name__)


@dataclass
class OpenedCourse:
    course: CourseDocument
    history: List[ChatMessage] = field(default_factory=list)


class CourseService:
    """High level course workflows used by the UI."""

    def __init__(self, store: LocalStore, provider: CourseContentProvider, events: EventBus | None = None):
        self.store = store
        self.provider = provider
        self.events = events

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate_course(self, topic: str) -> CourseDocument:
        """Ask the provider for a new course and open a chat session on it.

        The course is not saved; the user decides that separately.
        """

        cleaned = topic.strip()
        if not cleaned:
            raise InvalidArgumentError("topic must not be blank")

        course = self.provider.generate_course(cleaned)
        self.provider.start_chat_session(course)
        logger.info("Cours généré pour le sujet %r: %s module(s)", cleaned, len(course.modules))
        return course

    def save_generated_course(self, course: CourseDocument, user_id: str) -> CourseDocument:
        return course_crud.save_course(self.store, course, user_id, events=self.events)

    def extend_course(self, course_id: str, user_id: str, mode: ContinuationMode) -> CourseDocument | None:
        """Let the provider add modules or deepen sections, keeping the same id."""

        course = course_crud.get_course(self.store, course_id)
        if course is None:
            return None

        extended = self.provider.continue_generation(course, mode)
        extended = extended.model_copy(update={"id": course.id, "timestamp": course.timestamp})
        saved = course_crud.save_course(self.store, extended, user_id, events=self.events)
        self.provider.start_chat_session(saved)
        return saved

    # ------------------------------------------------------------------
    # Study
    # ------------------------------------------------------------------
    def open_course(self, course_id: str, user_id: str) -> OpenedCourse | None:
        course = course_crud.get_course(self.store, course_id)
        if course is None:
            return None

        course.progress = progress_crud.get_course_progress(self.store, course_id, user_id)
        self.provider.start_chat_session(course)
        return OpenedCourse(course=course, history=chat_crud.get_chat_history(self.store, course_id, user_id))

    def send_chat_message(self, course_id: str, user_id: str, text: str) -> ChatMessage:
        """Record the user's message, ask the provider, record and return the reply.

        Provider failures are answered with their message as the assistant's
        reply so the conversation shows what went wrong.
        """

        if not text.strip():
            raise InvalidArgumentError("message must not be blank")

        chat_crud.save_chat_message(self.store, course_id, user_id, ChatSender.USER, text)
        try:
            reply = self.provider.send_message_to_chat(text)
        except ContentProviderError as exc:
            logger.warning("Le fournisseur de contenu a échoué pour le cours %s: %s", course_id, exc)
            reply = str(exc) or "An error occurred."
        return chat_crud.save_chat_message(self.store, course_id, user_id, ChatSender.AI, reply)

    def complete_section(
        self, course_id: str, user_id: str, module_index: int, section_index: int
    ) -> CourseProgress | None:
        """Mark a section done using the course's real section count."""

        course = course_crud.get_course(self.store, course_id)
        if course is None:
            return None

        if module_index >= len(course.modules) or section_index >= len(course.modules[module_index].sections):
            raise InvalidArgumentError(
                f"Section ({module_index}, {section_index}) does not exist in course {course_id!r}"
            )

        return progress_crud.mark_section_completed(
            self.store,
            course_id,
            user_id,
            module_index,
            section_index,
            course.total_sections,
        )
