from __future__ import annotations

from typing import List, TYPE_CHECKING

from sqlalchemy import BigInteger, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from study_assistant.db.base_class import Base

if TYPE_CHECKING:
    from .course_model import Course


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    # Millisecondes depuis l'epoch, comme le client navigateur
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    courses: Mapped[List["Course"]] = relationship(back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id!r}, email={self.email!r})>"
