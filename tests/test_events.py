from __future__ import annotations

import pytest

from study_assistant.core.events import CourseSaved, EventBus
from tests.utils import make_course


def test_listeners_receive_events_in_subscription_order():
    bus = EventBus()
    received = []
    bus.subscribe(CourseSaved, lambda event: received.append(("first", event.course_id)))
    bus.subscribe(CourseSaved, lambda event: received.append(("second", event.course_id)))

    bus.publish(CourseSaved("c1", "Course", ()))

    assert received == [("first", "c1"), ("second", "c1")]


def test_failing_listener_does_not_stop_the_others(caplog):
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(CourseSaved, broken)
    bus.subscribe(CourseSaved, received.append)

    event = CourseSaved("c1", "Course", ())
    bus.publish(event)

    assert received == [event]
    assert "boom" in caplog.text


def test_unsubscribe_and_unrelated_events():
    bus = EventBus()
    received = []
    bus.subscribe(CourseSaved, received.append)
    bus.subscribe(CourseSaved, received.append)

    bus.publish("not a course event")
    bus.unsubscribe(CourseSaved, received.append)
    bus.unsubscribe(CourseSaved, received.append)
    bus.publish(CourseSaved("c1", "Course", ()))

    assert received == []


def test_event_from_course():
    event = CourseSaved.from_course(make_course(id="c1", modules=[("Basics", 1), ("Loops", 3)]))
    assert event == CourseSaved("c1", "Intro to Python", ("Basics", "Loops"))

    with pytest.raises(ValueError):
        CourseSaved.from_course(make_course())
