"""Endpoints de progression par cours."""
from fastapi import APIRouter, Depends, HTTPException, status

from study_assistant.api.dependencies import get_current_user, get_store
from study_assistant.crud import course_crud, progress_crud
from study_assistant.db.session import LocalStore
from study_assistant.schemas.progress_schema import CourseProgress, SectionCompletionRequest
from study_assistant.schemas.user_schema import UserProfile

router = APIRouter()


def _require_owned_course(store: LocalStore, course_id: str, user_id: str) -> None:
    if course_crud.get_course_owner(store, course_id) != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cours introuvable")


@router.get("/{course_id}", response_model=CourseProgress, summary="Progression sur un cours")
def read_progress(
    course_id: str,
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> CourseProgress:
    progress = progress_crud.get_course_progress(store, course_id, current_user.id)
    if progress is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aucune progression")
    return progress


@router.put("/{course_id}", response_model=CourseProgress, summary="Remplacer la progression")
def save_progress(
    course_id: str,
    payload: CourseProgress,
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> CourseProgress:
    """Le cours et l'utilisateur du chemin priment sur ceux du corps."""
    _require_owned_course(store, course_id, current_user.id)
    progress = payload.model_copy(update={"course_id": course_id, "user_id": current_user.id})
    return progress_crud.save_course_progress(store, progress)


@router.post(
    "/{course_id}/sections",
    response_model=CourseProgress,
    status_code=status.HTTP_200_OK,
    summary="Marquer une section comme terminée",
)
def complete_section(
    course_id: str,
    payload: SectionCompletionRequest,
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> CourseProgress:
    _require_owned_course(store, course_id, current_user.id)
    return progress_crud.mark_section_completed(
        store,
        course_id,
        current_user.id,
        payload.module_index,
        payload.section_index,
        payload.total_sections,
    )
