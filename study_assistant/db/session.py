"""Embedded SQLite store persisted as a single serialized image.

The database lives in memory (one shared connection through
:class:`~sqlalchemy.pool.StaticPool`). After every committed write the image is
exported with :meth:`sqlite3.Connection.serialize` and written to a
:class:`~study_assistant.db.blob_store.BlobStore` under a fixed key; on open the
image is loaded back with :meth:`sqlite3.Connection.deserialize`.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import Executable

from study_assistant.core.config import settings
from study_assistant.core.errors import ConcurrentUpdateError, StorageError
from study_assistant.db.base import Base
from study_assistant.db.blob_store import BlobStore

logger = logging.getLogger(__name__)

SQLITE_MEMORY_URL = "sqlite://"


def _create_memory_engine(echo: bool) -> Engine:
    return create_engine(
        SQLITE_MEMORY_URL,
        echo=echo,
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


class LocalStore:
    """Explicitly constructed handle on the local database.

    ``open()`` must succeed before any other call; everything else raises
    :class:`StorageError` until then.

    All sessions share one SQLite connection, so a store-wide re-entrant lock
    is held for the whole lifetime of each session and while the image is
    exported. Only one thread uses the connection at a time.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        *,
        blob_key: str | None = None,
        echo: bool | None = None,
    ) -> None:
        self.blob_store = blob_store
        self.blob_key = blob_key or settings.DATABASE_BLOB_KEY
        self._echo = settings.SQLALCHEMY_ECHO if echo is None else echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None
        self._initialized = False
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def open(self) -> "LocalStore":
        """Load the persisted image (if any) and create missing tables.

        Safe to call repeatedly and from several threads: only the first call
        does any work.
        """

        if self._initialized:
            return self

        with self._lock:
            if self._initialized:
                return self

            engine = _create_memory_engine(self._echo)
            try:
                image = self.blob_store.get(self.blob_key)
                if image:
                    self._load_image(engine, image)
                    logger.info("Image de base chargée depuis '%s' (%s octets)", self.blob_key, len(image))
                else:
                    logger.info("Aucune image persistée pour '%s', création d'un schéma vierge.", self.blob_key)
                Base.metadata.create_all(bind=engine)
            except (SQLAlchemyError, sqlite3.Error, OSError) as exc:
                engine.dispose()
                logger.error("Initialisation du stockage local échouée: %s", exc)
                raise StorageError("Failed to initialise the local database") from exc

            self._engine = engine
            self._session_factory = sessionmaker(
                bind=engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
            self._initialized = True
            logger.info("Stockage local prêt.")
        return self

    def initialize(self) -> None:
        self.open()

    def close(self) -> None:
        """Release the in-memory database. The last persisted image is kept."""

        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._initialized = False

    def __enter__(self) -> "LocalStore":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Sessions and writes
    # ------------------------------------------------------------------
    def _require_engine(self) -> Engine:
        if not self._initialized or self._engine is None:
            raise StorageError("Local database used before initialisation")
        return self._engine

    @contextmanager
    def session(self) -> Iterator[Session]:
        with self._lock:
            self._require_engine()
            assert self._session_factory is not None
            db = self._session_factory()
            try:
                yield db
            finally:
                db.close()

    def commit(self, db: Session) -> None:
        """Commit ``db`` and write the resulting image to the blob store."""

        try:
            db.commit()
        except StaleDataError as exc:
            db.rollback()
            raise ConcurrentUpdateError("Row was modified concurrently") from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Écriture refusée par la base locale: %s", exc)
            raise StorageError("The local database rejected the write") from exc
        self.persist()

    def run(self, *statements: Executable) -> None:
        """Execute write statements in a single transaction, then persist."""

        with self.session() as db:
            try:
                for statement in statements:
                    db.execute(statement)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("Requête refusée par la base locale: %s", exc)
                raise StorageError("The local database rejected the statement") from exc
            self.commit(db)

    # ------------------------------------------------------------------
    # Image export / import
    # ------------------------------------------------------------------
    @staticmethod
    def _load_image(engine: Engine, image: bytes) -> None:
        with engine.connect() as connection:
            connection.connection.driver_connection.deserialize(image)

    def export(self) -> bytes:
        with self._lock:
            engine = self._require_engine()
            with engine.connect() as connection:
                return connection.connection.driver_connection.serialize()

    def persist(self) -> None:
        """Write the current image to the blob store.

        On failure the in-memory database keeps the mutation; the caller gets a
        :class:`StorageError` so it can tell the user the change is not durable.
        """

        try:
            with self._lock:
                image = self.export()
                self.blob_store.put(self.blob_key, image)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Sauvegarde de l'image '%s' échouée: %s", self.blob_key, exc)
            raise StorageError("Failed to persist the local database image") from exc

    def persisted_size(self) -> int:
        """Size in bytes of the last persisted image."""
        return self.blob_store.size(self.blob_key)
