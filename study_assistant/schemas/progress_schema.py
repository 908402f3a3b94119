"""Schémas de progression par cours et par utilisateur."""

from __future__ import annotations

from typing import List

from pydantic import Field

from .base_schema import CamelModel


class CompletedSection(CamelModel):
    module_index: int = Field(..., ge=0)
    section_index: int = Field(..., ge=0)


class CourseProgress(CamelModel):
    course_id: str
    user_id: str
    completed_modules: List[int] = Field(default_factory=list)
    completed_sections: List[CompletedSection] = Field(default_factory=list)
    last_accessed_at: int
    progress_percentage: float = 0.0


class SectionCompletionRequest(CamelModel):
    """Payload sent by the UI when a section is marked as done."""

    module_index: int = Field(..., ge=0)
    section_index: int = Field(..., ge=0)
    total_sections: int = Field(..., gt=0)
