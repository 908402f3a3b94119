from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from study_assistant.db.base_class import Base

if TYPE_CHECKING:
    from .user_model import User


class Course(Base):
    """A saved course document.

    ``data`` holds the whole nested document (modules, sections, resources) as
    JSON. ``title``, ``introduction`` and ``timestamp`` are copied out of it so
    listing and search never need to decode the blob.
    """

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    introduction: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    data: Mapped[str] = mapped_column(Text, nullable=False)

    user: Mapped["User"] = relationship(back_populates="courses")

    def __repr__(self):
        return f"<Course(id={self.id!r}, user_id={self.user_id!r}, title={self.title!r})>"
