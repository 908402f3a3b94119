from fastapi import APIRouter, Depends, status

from study_assistant.api.dependencies import get_store
from study_assistant.crud import stats_crud
from study_assistant.db.session import LocalStore
from study_assistant.schemas.stats_schema import DatabaseStats

router = APIRouter()


@router.get("", response_model=DatabaseStats, summary="Statistiques de la base locale")
def read_stats(store: LocalStore = Depends(get_store)) -> DatabaseStats:
    return stats_crud.get_database_stats(store)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Vider la base locale")
def clear_database(store: LocalStore = Depends(get_store)) -> None:
    """Supprime cours, progression et conversations. L'utilisateur est conservé."""
    stats_crud.clear_database(store)
