from __future__ import annotations

from study_assistant import main
from study_assistant.core.config import settings
from study_assistant.crud import course_crud, user_crud
from tests.utils import make_course


def test_startup_wires_store_events_and_default_user(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path / "db"))
    monkeypatch.setattr(settings, "STUDY_STATE_DIR", str(tmp_path / "state"))

    main.startup()
    try:
        store = main.app.state.store
        user = user_crud.get_current_user(store)
        assert user.email == settings.DEFAULT_USER_EMAIL

        course_crud.save_course(store, make_course(id="c1"), user.id, events=main.app.state.events)
        assert [s.id for s in main.app.state.study_state.subjects] == ["subj-c1"]
    finally:
        main.shutdown()

    assert not store.is_initialized
    assert (tmp_path / "db" / settings.DATABASE_BLOB_KEY).exists()
    assert (tmp_path / "state" / "ai-study-subjects").exists()


def test_routes_are_mounted_under_api_v1():
    paths = {route.path for route in main.app.routes}
    assert "/api/v1/users/me" in paths
    assert "/api/v1/courses" in paths
    assert "/api/v1/progress/{course_id}/sections" in paths
    assert "/api/v1/study/tasks" in paths
