"""In-process publish/subscribe used to decouple the stores."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, DefaultDict, List, Tuple, Type

if TYPE_CHECKING:
    from study_assistant.schemas.course_schema import CourseDocument

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class CourseSaved:
    """Emitted once a course document has been committed and persisted."""

    course_id: str
    title: str
    module_titles: Tuple[str, ...]

    @classmethod
    def from_course(cls, course: "CourseDocument") -> "CourseSaved":
        if not course.id:
            raise ValueError("A saved course must carry an id")
        return cls(
            course_id=course.id,
            title=course.title,
            module_titles=tuple(module.module_title for module in course.modules),
        )


class EventBus:
    """Dispatch events to listeners registered for their exact type."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[Type[Any], List[Listener]] = defaultdict(list)

    def subscribe(self, event_type: Type[Any], listener: Listener) -> None:
        if listener not in self._listeners[event_type]:
            self._listeners[event_type].append(listener)

    def unsubscribe(self, event_type: Type[Any], listener: Listener) -> None:
        try:
            self._listeners[event_type].remove(listener)
        except ValueError:
            pass

    def publish(self, event: Any) -> None:
        """Call every listener of ``type(event)`` in subscription order.

        The publisher has already committed its own change when it emits, so a
        failing listener is logged and the remaining listeners still run.
        """

        for listener in list(self._listeners.get(type(event), ())):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Listener %r failed while handling %s", listener, type(event).__name__
                )
