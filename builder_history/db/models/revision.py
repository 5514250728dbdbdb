"""Revision model: point-in-time snapshots of a document."""

from datetime import datetime, UTC
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from builder_history.db.base import Base

if TYPE_CHECKING:
    from builder_history.db.models.document import Document
    from builder_history.db.models.user import User


class Revision(Base):
    """Stores historical versions of a document's core fields.

    Builder data for the snapshot is held in ``builder_meta`` rows keyed by
    the revision id.
    """

    __tablename__ = "revisions"

    document_id: Mapped[UUID] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    document: Mapped["Document"] = relationship("Document", back_populates="revisions")

    # Who made the change (nullable for system changes)
    user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    user: Mapped["User | None"] = relationship("User")

    # "<document id>-revision-v1" or "<document id>-autosave-v1"
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    modified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        index=True,
    )
