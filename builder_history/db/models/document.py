from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from builder_history.db.base import Base

if TYPE_CHECKING:
    from builder_history.db.models.revision import Revision
    from builder_history.db.models.user import User


class Document(Base):
    """A content record editable through the visual builder.

    Builder-authored data lives in ``builder_meta`` rows keyed by the document id,
    not on this table.
    """

    __tablename__ = "documents"

    user_id: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    user: Mapped["User | None"] = relationship("User", back_populates="documents")

    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="page", server_default="page", index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft", server_default="draft")

    revisions: Mapped[list["Revision"]] = relationship(
        "Revision",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="desc(Revision.modified_at)",
    )
