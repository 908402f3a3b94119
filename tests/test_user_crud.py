from __future__ import annotations

import pytest

from study_assistant.core.errors import StorageError
from study_assistant.crud import chat_crud, course_crud, progress_crud, user_crud
from study_assistant.schemas.user_schema import UserProfile
from tests.utils import create_user, make_course


def test_ensure_default_user_creates_once(store):
    first = user_crud.ensure_default_user(store, name="Student", email="student@localhost")
    second = user_crud.ensure_default_user(store, name="Other", email="other@localhost")

    assert first.id.startswith("user_")
    assert second == first
    assert user_crud.get_current_user(store) == first


def test_current_user_is_the_oldest(store):
    create_user(store, id="late", email="late@example.com", created_at=2000)
    create_user(store, id="early", email="early@example.com", created_at=1000)

    assert user_crud.get_current_user(store).id == "early"


def test_save_user_replaces_profile(store):
    user = create_user(store)
    user_crud.save_user(store, user.model_copy(update={"name": "Renamed"}))

    assert user_crud.get_user_by_id(store, user.id).name == "Renamed"


def test_duplicate_email_is_rejected(store):
    create_user(store)
    with pytest.raises(StorageError):
        user_crud.save_user(
            store,
            UserProfile(id="u2", name="Twin", email="student@example.com", created_at=1),
        )


def test_no_user(store):
    assert user_crud.get_current_user(store) is None
    assert user_crud.get_user_by_id(store, "missing") is None


def test_delete_user_cascades(store):
    create_user(store)
    create_user(store, id="u2", email="second@example.com")
    course_crud.save_course(store, make_course(id="c1"), "u1")
    course_crud.save_course(store, make_course(id="c2", title="Kept"), "u2")
    progress_crud.mark_section_completed(store, "c1", "u1", 0, 0, 4)
    progress_crud.mark_section_completed(store, "c1", "u2", 0, 0, 4)
    chat_crud.save_chat_message(store, "c1", "u2", "user", "visitor message")
    chat_crud.save_chat_message(store, "c2", "u1", "user", "left on someone else's course")

    user_crud.delete_user(store, "u1")

    assert user_crud.get_user_by_id(store, "u1") is None
    assert course_crud.get_course(store, "c1") is None
    assert progress_crud.get_course_progress(store, "c1", "u2") is None
    assert chat_crud.get_chat_history(store, "c1", "u2") == []
    assert chat_crud.get_chat_history(store, "c2", "u1") == []
    assert [c.id for c in course_crud.get_courses_by_user_id(store, "u2")] == ["c2"]
