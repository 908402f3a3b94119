from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import BigInteger, Float, ForeignKey, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from study_assistant.db.base_class import Base


class CourseProgressRecord(Base):
    """Completion state of one course for one user.

    ``version`` is the SQLAlchemy version counter: every flush issues
    ``UPDATE ... WHERE version = <loaded value>`` and a mismatch raises
    ``StaleDataError``.
    """

    __tablename__ = "course_progress"
    __table_args__ = (
        UniqueConstraint("course_id", "user_id", name="uq_course_progress_course_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[str] = mapped_column(String, ForeignKey("courses.id"), nullable=False)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False)
    completed_modules: Mapped[List[int]] = mapped_column(JSON, nullable=False, default=list)
    # Liste de {"moduleIndex": int, "sectionIndex": int}
    completed_sections: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    last_accessed_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    progress_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default="0")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return (
            f"<CourseProgressRecord(course_id={self.course_id!r}, user_id={self.user_id!r}, "
            f"progress={self.progress_percentage})>"
        )
