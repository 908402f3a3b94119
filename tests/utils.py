"""Utility helpers for test factories."""

from __future__ import annotations

from datetime import date

from study_assistant.crud import user_crud
from study_assistant.schemas.course_schema import CourseDocument, Module, Section
from study_assistant.schemas.user_schema import UserProfile

FIXED_TODAY = date(2024, 3, 1)


def create_user(store, **kwargs) -> UserProfile:
    defaults = {
        "id": "u1",
        "name": "Student",
        "email": "student@example.com",
        "created_at": 1_700_000_000_000,
    }
    defaults.update(kwargs)
    return user_crud.save_user(store, UserProfile(**defaults))


def make_course(
    *,
    id: str | None = None,
    title: str = "Intro to Python",
    introduction: str = "Learn the basics of Python.",
    modules: list[tuple[str, int]] | None = None,
    timestamp: int | None = None,
) -> CourseDocument:
    """Build a course from ``(module_title, section_count)`` pairs."""

    layout = modules if modules is not None else [("Basics", 2), ("Functions", 2)]
    return CourseDocument(
        id=id,
        title=title,
        introduction=introduction,
        timestamp=timestamp,
        modules=[
            Module(
                module_title=module_title,
                sections=[
                    Section(heading=f"{module_title} {index + 1}", content=f"<p>{module_title} {index + 1}</p>")
                    for index in range(section_count)
                ],
            )
            for module_title, section_count in layout
        ],
    )
