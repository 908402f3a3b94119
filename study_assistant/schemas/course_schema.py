"""Document shape of a generated course (course -> modules -> sections -> resources)."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import Field

from .base_schema import CamelModel
from .progress_schema import CourseProgress


class CodeSnippet(CamelModel):
    language: str
    code: str
    description: str = ""


class Resource(CamelModel):
    type: Literal["video", "article", "image", "documentation"]
    title: str
    url: str
    description: Optional[str] = None


class Section(CamelModel):
    heading: str
    # HTML produit par le fournisseur de contenu
    content: str
    code_snippet: Optional[CodeSnippet] = None
    resources: Optional[List[Resource]] = None


class Module(CamelModel):
    module_title: str
    sections: List[Section] = Field(default_factory=list)


class VideoSuggestion(CamelModel):
    title: str
    query: str
    video_id: str


class Reference(CamelModel):
    title: str
    url: str


class CourseDocument(CamelModel):
    """A course as produced by the content provider and returned to the UI.

    ``progress`` is never stored inside the document; repositories attach it
    from the progress table when listing a user's courses.
    """

    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    introduction: str = ""
    modules: List[Module] = Field(default_factory=list)
    video_suggestions: List[VideoSuggestion] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)
    timestamp: Optional[int] = None
    progress: Optional[CourseProgress] = None

    @property
    def total_sections(self) -> int:
        return sum(len(module.sections) for module in self.modules)

    def to_storage_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude={"progress"}, exclude_none=True)
