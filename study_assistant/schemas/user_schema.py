from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base_schema import CamelModel


class UserProfile(CamelModel):
    id: str
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    created_at: int


class UserProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
