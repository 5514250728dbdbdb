"""ContentStore backed by the SQLAlchemy services."""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from builder_history.db.models import Document, User
from builder_history.db.services import document_service, meta_service, revision_service
from builder_history.lib.document_types import DocumentTypeRegistry, document_types
from builder_history.lib.exceptions import RevisionDeleteError
from builder_history.revisions.protocols import AuthorRecord, RevisionRecord


def to_revision_record(revision) -> RevisionRecord:
    return RevisionRecord(
        id=revision.id,
        document_id=revision.document_id,
        author_id=revision.user_id,
        name=revision.name,
        modified_at=revision.modified_at,
    )


class SQLAlchemyContentStore:
    """Adapts the document, revision and meta services to the ContentStore protocol."""

    def __init__(
        self,
        db_session: AsyncSession,
        revisions_to_keep: int = -1,
        types: DocumentTypeRegistry = document_types,
    ) -> None:
        self.db_session = db_session
        self.revisions_to_keep = revisions_to_keep
        self.types = types

    async def get_document(self, document_id: UUID) -> Document | None:
        return await document_service.get_document_by_id(self.db_session, document_id)

    async def get_revision_parent_id(self, revision_id: UUID) -> UUID | None:
        return await revision_service.get_revision_parent_id(self.db_session, revision_id)

    async def get_revisions(self, document_id: UUID, query_args: dict[str, Any]) -> Sequence[Any]:
        ids_only = query_args.get("fields") == "ids"
        revisions = await revision_service.list_revisions(
            self.db_session,
            document_id,
            limit=query_args.get("posts_per_page"),
            meta_key=query_args.get("meta_key"),
            ids_only=ids_only,
            order=str(query_args.get("order", "DESC")).upper(),
        )
        if ids_only:
            return revisions
        return [to_revision_record(revision) for revision in revisions]

    async def delete_revision(self, revision_id: UUID) -> Any:
        try:
            return await revision_service.delete_revision(self.db_session, revision_id)
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            raise RevisionDeleteError(str(e)) from e

    async def is_built_with_builder(self, object_id: UUID) -> bool:
        return await meta_service.is_built_with_builder(self.db_session, object_id)

    async def set_built_with_builder(self, object_id: UUID, is_builder: bool) -> None:
        await meta_service.set_built_with_builder(self.db_session, object_id, is_builder)

    async def copy_builder_meta(self, from_id: UUID, to_id: UUID) -> None:
        await meta_service.copy_builder_meta(self.db_session, from_id, to_id)

    async def get_plain_builder_data(self, object_id: UUID) -> str | None:
        return await meta_service.get_plain_builder_data(self.db_session, object_id)

    async def get_author(self, author_id: UUID | None) -> AuthorRecord | None:
        if author_id is None:
            return None
        result = await self.db_session.execute(select(User).where(User.id == author_id))
        user = result.scalar_one_or_none()
        if user is None:
            return None
        return AuthorRecord(
            id=user.id,
            display_name=user.display_name,
            email=user.email,
            picture_url=user.picture_url,
        )

    async def revisions_enabled(self, document: Document) -> bool:
        return revision_service.revisions_enabled(document, self.revisions_to_keep, self.types)
