from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from builder_history.db.base import Base

if TYPE_CHECKING:
    from builder_history.db.models.document import Document


class User(Base):
    """An author of documents and revisions."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    picture_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    documents: Mapped[list["Document"]] = relationship("Document", back_populates="user")

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0]
