from fastapi import APIRouter, Depends, status

from study_assistant.api.dependencies import get_current_user, get_store
from study_assistant.crud import user_crud
from study_assistant.db.session import LocalStore
from study_assistant.schemas.user_schema import UserProfile, UserProfileUpdate

router = APIRouter()


@router.get("/me", response_model=UserProfile, summary="Profil de l'utilisateur local")
def read_current_user(current_user: UserProfile = Depends(get_current_user)) -> UserProfile:
    return current_user


@router.put("/me", response_model=UserProfile, summary="Modifier le profil local")
def update_current_user(
    payload: UserProfileUpdate,
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> UserProfile:
    updated = current_user.model_copy(update=payload.model_dump(exclude_unset=True, exclude_none=True))
    return user_crud.save_user(store, updated)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT, summary="Supprimer l'utilisateur et ses données")
def delete_current_user(
    store: LocalStore = Depends(get_store),
    current_user: UserProfile = Depends(get_current_user),
) -> None:
    user_crud.delete_user(store, current_user.id)
