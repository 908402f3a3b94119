import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Imports de l'application
from study_assistant.api.api import api_router
from study_assistant.api.errors import register_exception_handlers
from study_assistant.core.config import settings
from study_assistant.core.events import CourseSaved, EventBus
from study_assistant.crud import user_crud
from study_assistant.db.blob_store import FileBlobStore
from study_assistant.db.session import LocalStore
from study_assistant.services.study_state_service import StudyStateStore

# --- Configuration du logging ---
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# --- Initialisation de l'application FastAPI ---
app = FastAPI(
    title="AI Study Assistant API",
    openapi_url="/api/v1/openapi.json",
)


def _sanitize_origin(origin: str | None) -> str | None:
    if not origin:
        return None
    value = origin.strip()
    if not value:
        return None
    if not value.startswith("http"):
        value = f"http://{value}"
    return value.rstrip("/")


cors_origins = sorted({o for o in (_sanitize_origin(o) for o in settings.BACKEND_CORS_ORIGINS) if o})
logger.info("CORS origins configurés: %s", cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Content-Type"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


# --- Événements de démarrage / arrêt ---
@app.on_event("startup")
def startup() -> None:
    logger.info("Ouverture du stockage local dans '%s'...", settings.DATA_DIR)
    store = LocalStore(FileBlobStore(settings.DATA_DIR)).open()

    study_state = StudyStateStore(FileBlobStore(settings.STUDY_STATE_DIR))
    events = EventBus()
    events.subscribe(CourseSaved, study_state.on_course_saved)

    user_crud.ensure_default_user(
        store,
        name=settings.DEFAULT_USER_NAME,
        email=settings.DEFAULT_USER_EMAIL,
    )

    app.state.store = store
    app.state.study_state = study_state
    app.state.events = events
    logger.info("✅ Stockage local prêt.")


@app.on_event("shutdown")
def shutdown() -> None:
    store = getattr(app.state, "store", None)
    if store is not None:
        store.close()
        logger.info("Stockage local fermé.")


# --- Route Racine ---
@app.get("/")
def read_root():
    return {"message": "Welcome to the AI Study Assistant API!"}
