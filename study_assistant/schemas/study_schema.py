"""Tâches, matières et objectifs gérés hors de la base relationnelle."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import Field

from .base_schema import CamelModel


class Task(CamelModel):
    id: str
    text: str
    completed: bool = False
    due_date: date


class TaskCreate(CamelModel):
    text: str = Field(..., min_length=1)
    due_date: date


class TaskUpdate(CamelModel):
    text: Optional[str] = Field(None, min_length=1)
    completed: Optional[bool] = None
    due_date: Optional[date] = None


class Subject(CamelModel):
    id: str
    name: str
    progress: int = Field(0, ge=0, le=100)


class SubjectCreate(CamelModel):
    name: str = Field(..., min_length=1)


class SubjectUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    progress: Optional[int] = Field(None, ge=0, le=100)


class Goal(CamelModel):
    id: str
    text: str
    achieved: bool = False


class GoalCreate(CamelModel):
    text: str = Field(..., min_length=1)


class GoalUpdate(CamelModel):
    text: Optional[str] = Field(None, min_length=1)
    achieved: Optional[bool] = None
