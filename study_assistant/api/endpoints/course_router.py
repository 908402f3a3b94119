from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from study_assistant.api.dependencies import get_current_user, get_events, get_store
from study_assistant.core.events import EventBus
from study_assistant.crud import course_crud
from study_assistant.db.session import LocalStore
from study_assistant.schemas.course_schema import CourseDocument
from study_assistant.schemas.user_schema import UserProfile

router = APIRouter()


def _get_owned_course(store: LocalStore, course_id: str, user_id: str) -> CourseDocument:
    if course_crud.get_course_owner(store, course_id) != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cours introuvable")
    course = course_crud.get_course(store, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cours introuvable")
    return course


@router.get("", response_model=List[CourseDocument], summary="Lister les cours de l'utilisateur")
def list_courses(
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> List[CourseDocument]:
    """Newest first, each course with its progress attached when there is one."""
    return course_crud.get_courses_by_user_id(store, current_user.id)


@router.get("/search", response_model=List[CourseDocument], summary="Rechercher dans les cours")
def search_courses(
    q: str = Query(..., min_length=1),
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> List[CourseDocument]:
    return course_crud.search_courses(store, q, current_user.id)


@router.get("/{course_id}", response_model=CourseDocument, summary="Récupérer un cours")
def read_course(
    course_id: str,
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> CourseDocument:
    return _get_owned_course(store, course_id, current_user.id)


@router.post("", response_model=CourseDocument, summary="Enregistrer un cours")
def save_course(
    payload: CourseDocument,
    store: LocalStore = Depends(get_store),
    events: EventBus | None = Depends(get_events),
    current_user: UserProfile = Depends(get_current_user),
) -> CourseDocument:
    if payload.id is not None:
        owner = course_crud.get_course_owner(store, payload.id)
        if owner is not None and owner != current_user.id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cours introuvable")
    return course_crud.save_course(store, payload, current_user.id, events=events)


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Supprimer un cours")
def delete_course(
    course_id: str,
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> None:
    _get_owned_course(store, course_id, current_user.id)
    course_crud.delete_course(store, course_id)
