"""Interface of the LLM-backed course generator.

Concrete providers (Gemini, OpenAI, Groq...) live outside this package; the
persistence core only relies on the :class:`CourseDocument` shape they return.
"""

from __future__ import annotations

import enum
from typing import Protocol, runtime_checkable

from study_assistant.schemas.course_schema import CourseDocument


class ContinuationMode(str, enum.Enum):
    NEW_MODULES = "new-modules"
    EXPAND_SECTIONS = "expand-sections"


class ContentProviderError(Exception):
    """Raised by providers when generation or chat fails (quota, network, refusal)."""


@runtime_checkable
class CourseContentProvider(Protocol):
    def generate_course(self, topic: str) -> CourseDocument: ...

    def continue_generation(self, course: CourseDocument, mode: ContinuationMode) -> CourseDocument: ...

    def start_chat_session(self, course: CourseDocument) -> None: ...

    def send_message_to_chat(self, text: str) -> str: ...
