from __future__ import annotations

from study_assistant.services.study_timer import StudyTimer


def test_initial_state():
    timer = StudyTimer(work_minutes=25, break_minutes=5)
    assert timer.formatted_time == "25:00"
    assert timer.progress == 0
    assert timer.is_work_session
    assert not timer.is_active
    assert timer.cycles == 0


def test_tick_only_counts_while_active():
    timer = StudyTimer(work_minutes=1, break_minutes=1)
    assert timer.tick(10) is None
    assert timer.formatted_time == "01:00"

    timer.start()
    timer.tick(15)
    assert timer.formatted_time == "00:45"
    assert timer.progress == 25

    timer.pause()
    timer.tick(15)
    assert timer.formatted_time == "00:45"


def test_work_session_rolls_into_break():
    timer = StudyTimer(work_minutes=1, break_minutes=2)
    timer.start()

    assert timer.tick(60) == "work"
    assert timer.cycles == 1
    assert not timer.is_work_session
    assert not timer.is_active
    assert timer.formatted_time == "02:00"

    timer.toggle()
    assert timer.tick(500) == "break"
    assert timer.is_work_session
    assert timer.cycles == 1
    assert timer.formatted_time == "01:00"


def test_reset():
    timer = StudyTimer(work_minutes=1, break_minutes=1)
    timer.start()
    timer.tick(60)

    timer.reset(work=False)
    assert not timer.is_work_session
    assert timer.cycles == 1

    timer.reset_all()
    assert timer.is_work_session
    assert timer.cycles == 0
    assert timer.formatted_time == "01:00"


def test_defaults_come_from_settings(monkeypatch):
    from study_assistant.services import study_timer

    monkeypatch.setattr(study_timer.settings, "WORK_MINUTES", 50)
    monkeypatch.setattr(study_timer.settings, "BREAK_MINUTES", 10)
    timer = StudyTimer()
    assert timer.formatted_time == "50:00"
    assert timer.break_seconds == 600
