from pydantic_settings import BaseSettings
from typing import List
from pydantic import ValidationError, field_validator
import sys


class Settings(BaseSettings):
    # --- Stockage local ---
    DATA_DIR: str = "./data"
    DATABASE_BLOB_KEY: str = "ai-study-assistant.db"
    STUDY_STATE_DIR: str = "./data/study-state"
    SQLALCHEMY_ECHO: bool = False

    # Optimistic retries for the progress read-modify-write
    PROGRESS_UPDATE_MAX_ATTEMPTS: int = 3

    # --- Utilisateur local (créé au premier lancement) ---
    DEFAULT_USER_NAME: str = "Student"
    DEFAULT_USER_EMAIL: str = "student@localhost"

    # --- Minuteur pomodoro ---
    WORK_MINUTES: int = 25
    BREAK_MINUTES: int = 5

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @field_validator("DATABASE_BLOB_KEY", mode="before")
    @classmethod
    def _normalize_blob_key(cls, value: str) -> str:
        """Keep the image key usable as a single file name.

        The blob store maps keys to file names inside ``DATA_DIR``; separators
        would silently move the image into a sub-directory, so they are
        flattened here.
        """

        if not isinstance(value, str):
            return value

        key = value.strip().replace("/", "-").replace("\\", "-")
        if not key:
            raise ValueError("DATABASE_BLOB_KEY must not be empty")
        return key

    @field_validator("WORK_MINUTES", "BREAK_MINUTES", "PROGRESS_UPDATE_MAX_ATTEMPTS")
    @classmethod
    def _require_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value


def _log_settings_validation_error(exc: ValidationError) -> None:
    """Pretty-print missing or invalid environment variables.

    The exception bubbles up during module import, which makes it hard to spot
    the culprit variable. The structured payload is printed before re-raising.
    """

    header = "Configuration error while loading environment variables:"
    print(header, file=sys.stderr)

    try:
        details = exc.errors()
    except Exception:  # pragma: no cover
        details = None

    if details:
        for error in details:
            location = ".".join(str(part) for part in error.get("loc", ()))
            message = error.get("msg", "Unknown validation error")
            type_name = error.get("type")
            hint_parts = [message]
            if type_name:
                hint_parts.append(f"(type={type_name})")
            hint = " ".join(hint_parts)
            print(f"  - {location}: {hint}", file=sys.stderr)
    else:
        print(exc, file=sys.stderr)


try:
    settings = Settings()
except ValidationError as exc:  # pragma: no cover - exercised at runtime
    _log_settings_validation_error(exc)
    raise
