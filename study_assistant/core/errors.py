"""Exceptions shared by the persistence core.

Missing rows are never reported through exceptions: read operations return
``None`` or an empty list instead.
"""

from __future__ import annotations


class StorageError(Exception):
    """Raised when the local store cannot initialise, write or persist its image."""


class ConcurrentUpdateError(StorageError):
    """Raised when a versioned row changed between read and conditional update."""


class InvalidArgumentError(ValueError):
    """Raised when a caller supplies arguments an operation cannot honour."""
