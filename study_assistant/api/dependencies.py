import logging

from fastapi import Depends, HTTPException, Request, status

from study_assistant.core.events import EventBus
from study_assistant.crud import user_crud
from study_assistant.db.session import LocalStore
from study_assistant.schemas.user_schema import UserProfile
from study_assistant.services.study_state_service import StudyStateStore

log = logging.getLogger(__name__)


def get_store(request: Request) -> LocalStore:
    """Return the store opened at startup and kept on ``app.state``."""

    store = getattr(request.app.state, "store", None)
    if store is None or not store.is_initialized:
        log.error("Requête reçue alors que le stockage local n'est pas ouvert.")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage_unavailable")
    return store


def get_study_state(request: Request) -> StudyStateStore:
    study_state = getattr(request.app.state, "study_state", None)
    if study_state is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="storage_unavailable")
    return study_state


def get_events(request: Request) -> EventBus | None:
    return getattr(request.app.state, "events", None)


def get_current_user(store: LocalStore = Depends(get_store)) -> UserProfile:
    """The local deployment has a single user, created at startup."""

    user = user_crud.get_current_user(store)
    if user is None:
        log.warning("Aucun utilisateur local trouvé.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user_not_found")
    return user
