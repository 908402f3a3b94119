from __future__ import annotations

from .base_schema import CamelModel


class DatabaseStats(CamelModel):
    total_courses: int = 0
    total_messages: int = 0
    # Taille de l'image persistée, en octets
    database_size: int = 0
