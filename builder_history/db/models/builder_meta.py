from uuid import UUID

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from builder_history.db.base import Base


class BuilderMeta(Base):
    """A builder key/value pair attached to a document or a revision.

    ``object_id`` is deliberately not a foreign key: documents and revisions
    share the same meta table.
    """

    __tablename__ = "builder_meta"
    __table_args__ = (UniqueConstraint("object_id", "meta_key", name="uq_builder_meta_object_key"),)

    object_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    meta_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    meta_value: Mapped[str] = mapped_column(Text, nullable=False, default="")
