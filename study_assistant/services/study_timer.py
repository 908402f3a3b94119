"""Pomodoro timer driven by explicit ticks.

The caller owns the clock: a UI schedules ``tick()`` once per second while the
timer is active. Nothing here is persisted.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from study_assistant.core.config import settings

logger = logging.getLogger(__name__)

Phase = Literal["work", "break"]


class StudyTimer:
    def __init__(self, work_minutes: int | None = None, break_minutes: int | None = None):
        self.work_seconds = (work_minutes or settings.WORK_MINUTES) * 60
        self.break_seconds = (break_minutes or settings.BREAK_MINUTES) * 60
        self.is_work_session = True
        self.is_active = False
        self.cycles = 0
        self.remaining = self.work_seconds

    @property
    def phase(self) -> Phase:
        return "work" if self.is_work_session else "break"

    @property
    def phase_length(self) -> int:
        return self.work_seconds if self.is_work_session else self.break_seconds

    @property
    def formatted_time(self) -> str:
        minutes, seconds = divmod(self.remaining, 60)
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def progress(self) -> float:
        """Elapsed share of the current phase, between 0 and 100."""
        total = self.phase_length
        return (total - self.remaining) / total * 100

    def start(self) -> None:
        self.is_active = True

    def pause(self) -> None:
        self.is_active = False

    def toggle(self) -> None:
        self.is_active = not self.is_active

    def tick(self, seconds: int = 1) -> Optional[Phase]:
        """Advance the countdown; return the phase that just finished, if any."""

        if not self.is_active or seconds <= 0:
            return None

        self.remaining = max(0, self.remaining - seconds)
        if self.remaining > 0:
            return None

        finished = self.phase
        if self.is_work_session:
            self.cycles += 1
            self.is_work_session = False
            logger.info("Session de travail terminée (%s cycle(s))", self.cycles)
        else:
            self.is_work_session = True
            logger.info("Pause terminée")
        self.is_active = False
        self.remaining = self.phase_length
        return finished

    def reset(self, work: bool = True) -> None:
        self.is_active = False
        self.is_work_session = work
        self.remaining = self.phase_length

    def reset_all(self) -> None:
        self.reset(work=True)
        self.cycles = 0
