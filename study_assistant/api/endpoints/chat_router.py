from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from study_assistant.api.dependencies import get_current_user, get_store
from study_assistant.crud import chat_crud, course_crud
from study_assistant.db.session import LocalStore
from study_assistant.schemas.chat_schema import ChatMessage, ChatMessageCreate
from study_assistant.schemas.user_schema import UserProfile

router = APIRouter()


def _require_owned_course(store: LocalStore, course_id: str, user_id: str) -> None:
    if course_crud.get_course_owner(store, course_id) != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cours introuvable")


@router.get("/{course_id}", response_model=List[ChatMessage], summary="Historique de la conversation")
def read_history(
    course_id: str,
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> List[ChatMessage]:
    return chat_crud.get_chat_history(store, course_id, current_user.id)


@router.post(
    "/{course_id}",
    response_model=ChatMessage,
    status_code=status.HTTP_201_CREATED,
    summary="Ajouter un message",
)
def append_message(
    course_id: str,
    payload: ChatMessageCreate,
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> ChatMessage:
    _require_owned_course(store, course_id, current_user.id)
    return chat_crud.save_chat_message(store, course_id, current_user.id, payload.sender, payload.text)
