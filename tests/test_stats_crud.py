from __future__ import annotations

from study_assistant.crud import chat_crud, course_crud, progress_crud, stats_crud, user_crud
from tests.utils import create_user, make_course


def test_empty_database_stats(store):
    stats = stats_crud.get_database_stats(store)
    assert stats.total_courses == 0
    assert stats.total_messages == 0


def test_stats_count_courses_and_messages(store):
    create_user(store)
    course_crud.save_course(store, make_course(id="c1"), "u1")
    course_crud.save_course(store, make_course(id="c2", title="Second"), "u1")
    chat_crud.save_chat_message(store, "c1", "u1", "user", "hi")

    stats = stats_crud.get_database_stats(store)
    assert stats.total_courses == 2
    assert stats.total_messages == 1
    assert stats.database_size == store.persisted_size() > 0
    assert stats.model_dump(by_alias=True) == {
        "totalCourses": 2,
        "totalMessages": 1,
        "databaseSize": stats.database_size,
    }


def test_clear_database_keeps_users(store):
    create_user(store)
    course_crud.save_course(store, make_course(id="c1"), "u1")
    progress_crud.mark_section_completed(store, "c1", "u1", 0, 0, 4)
    chat_crud.save_chat_message(store, "c1", "u1", "user", "hi")

    stats_crud.clear_database(store)

    stats = stats_crud.get_database_stats(store)
    assert (stats.total_courses, stats.total_messages) == (0, 0)
    assert progress_crud.get_course_progress(store, "c1", "u1") is None
    assert user_crud.get_user_by_id(store, "u1") is not None
