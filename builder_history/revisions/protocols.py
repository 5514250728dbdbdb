"""Collaborator contracts the revision coordinator depends on."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID


@dataclass
class RevisionRecord:
    """A host revision as the coordinator sees it."""

    id: UUID
    document_id: UUID
    author_id: UUID | None
    name: str
    modified_at: datetime

    @property
    def is_autosave(self) -> bool:
        # Autosaves are told apart by their name alone
        return "autosave" in self.name


@dataclass
class AuthorRecord:
    id: UUID
    display_name: str
    email: str | None = None
    picture_url: str | None = None


@runtime_checkable
class ContentStore(Protocol):
    """Host documents, revisions and builder meta."""

    async def get_document(self, document_id: UUID) -> Any | None:
        """Return the document, or None if it does not exist."""
        ...

    async def get_revision_parent_id(self, revision_id: UUID) -> UUID | None:
        """Return the document a revision belongs to, or None if it is not a revision."""
        ...

    async def get_revisions(self, document_id: UUID, query_args: dict[str, Any]) -> Sequence[Any]:
        """Return revisions matching ``query_args`` in display order.

        Recognised keys: ``posts_per_page``, ``meta_key``, ``fields`` and ``order``.
        With ``fields="ids"`` the sequence holds revision ids only.
        """
        ...

    async def delete_revision(self, revision_id: UUID) -> Any:
        """Delete a revision. Falsy result (or RevisionDeleteError) means failure."""
        ...

    async def is_built_with_builder(self, object_id: UUID) -> bool: ...

    async def set_built_with_builder(self, object_id: UUID, is_builder: bool) -> None: ...

    async def copy_builder_meta(self, from_id: UUID, to_id: UUID) -> None: ...

    async def get_plain_builder_data(self, object_id: UUID) -> str | None: ...

    async def get_author(self, author_id: UUID | None) -> AuthorRecord | None: ...

    async def revisions_enabled(self, document: Any) -> bool: ...


@runtime_checkable
class StylesheetRegenerator(Protocol):
    """Recomputes and persists a document's derived stylesheet."""

    async def update(self, document_id: UUID) -> None: ...
