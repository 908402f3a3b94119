"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("PROGRESS_UPDATE_MAX_ATTEMPTS", "3")
os.environ.setdefault("WORK_MINUTES", "25")
os.environ.setdefault("BREAK_MINUTES", "5")

# Ensure the study_assistant package is importable when tests run from the repo root.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from study_assistant.core.events import CourseSaved, EventBus
from study_assistant.db.blob_store import MemoryBlobStore
from study_assistant.db.session import LocalStore
from study_assistant.services.study_state_service import StudyStateStore
from tests.utils import FIXED_TODAY


@pytest.fixture()
def blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def store(blob_store):
    local_store = LocalStore(blob_store, echo=False).open()
    try:
        yield local_store
    finally:
        local_store.close()


@pytest.fixture()
def state_blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture()
def study_state(state_blob_store) -> StudyStateStore:
    return StudyStateStore(state_blob_store, today=lambda: FIXED_TODAY)


@pytest.fixture()
def events(study_state) -> EventBus:
    bus = EventBus()
    bus.subscribe(CourseSaved, study_state.on_course_saved)
    return bus
