"""Revision service: the host side of document history.

Creating, restoring and deleting revisions happens here. Each lifecycle
step fires a hook so the builder can attach its own data to the snapshot.
"""

import logging
from datetime import datetime, UTC
from typing import Literal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from builder_history.db.models import BuilderMeta, Document, Revision
from builder_history.db.services import meta_service
from builder_history.lib.document_types import REVISIONS_FEATURE, DocumentTypeRegistry, document_types
from builder_history.lib.hooks import (
    HookRegistry,
    REVISION_CREATED,
    REVISION_POST_HAS_CHANGED,
    REVISION_RESTORED,
    hooks,
)

logger = logging.getLogger(__name__)

Order = Literal["ASC", "DESC"]


def revision_name(document_id: UUID, autosave: bool = False) -> str:
    """Build the slug that marks a revision as manual or automatic."""
    kind = "autosave" if autosave else "revision"
    return f"{document_id}-{kind}-v1"


def revisions_to_keep(
    document: Document,
    configured: int = -1,
    types: DocumentTypeRegistry = document_types,
) -> int:
    """How many revisions a document keeps: -1 for all, 0 when disabled."""
    if not types.supports(document.type, REVISIONS_FEATURE):
        return 0
    return configured


def revisions_enabled(
    document: Document,
    configured: int = -1,
    types: DocumentTypeRegistry = document_types,
) -> bool:
    return revisions_to_keep(document, configured, types) != 0


async def create_revision(
    db_session: AsyncSession,
    document: Document,
    user_id: UUID | None = None,
    autosave: bool = False,
    registry: HookRegistry = hooks,
) -> Revision:
    """Snapshot the document's current fields and announce the new revision.

    Args:
        db_session: Database session
        document: The document to snapshot
        user_id: ID of the user making the change (optional)
        autosave: Name the snapshot as an autosave
        registry: Hook registry notified through ``revision_created``

    Returns:
        The created Revision
    """
    revision = Revision(
        document_id=document.id,
        user_id=user_id,
        name=revision_name(document.id, autosave),
        title=document.title,
        content=document.content,
        modified_at=datetime.now(UTC),
    )

    db_session.add(revision)
    await db_session.commit()
    await db_session.refresh(revision)

    await registry.do_action(REVISION_CREATED, revision.id)
    return revision


async def get_latest_revision(
    db_session: AsyncSession,
    document_id: UUID,
    include_autosaves: bool = False,
) -> Revision | None:
    query = (
        select(Revision)
        .where(Revision.document_id == document_id)
        .order_by(Revision.modified_at.desc())
        .limit(1)
    )
    if not include_autosaves:
        query = query.where(Revision.name.not_like("%autosave%"))

    result = await db_session.execute(query)
    return result.scalar_one_or_none()


async def save_document_revision(
    db_session: AsyncSession,
    document: Document,
    user_id: UUID | None = None,
    keep: int = -1,
    registry: HookRegistry = hooks,
    types: DocumentTypeRegistry = document_types,
) -> Revision | None:
    """Store a revision after a document save, if one is warranted.

    A revision is skipped when revisions are disabled for the document type,
    or when the document's fields match the latest revision and no
    ``revision_post_has_changed`` filter says otherwise. Revisions beyond the
    retention limit are pruned, oldest first.

    Returns:
        The new Revision, or None when nothing was stored
    """
    keep = revisions_to_keep(document, keep, types)
    if keep == 0:
        return None

    latest = await get_latest_revision(db_session, document.id)
    if latest is not None:
        has_changed = latest.title != document.title or latest.content != document.content
        has_changed = await registry.apply_filters(
            REVISION_POST_HAS_CHANGED, has_changed, latest, document
        )
        if not has_changed:
            return None

    revision = await create_revision(db_session, document, user_id, registry=registry)

    if keep > 0:
        await prune_revisions(db_session, document.id, keep)

    return revision


async def get_autosave(
    db_session: AsyncSession,
    document_id: UUID,
    user_id: UUID | None = None,
) -> Revision | None:
    """Return the autosave a user holds for a document, if any."""
    result = await db_session.execute(
        select(Revision).where(
            Revision.document_id == document_id,
            Revision.user_id == user_id,
            Revision.name == revision_name(document_id, autosave=True),
        )
    )
    return result.scalar_one_or_none()


async def put_autosave(
    db_session: AsyncSession,
    document: Document,
    user_id: UUID | None = None,
    registry: HookRegistry = hooks,
) -> Revision:
    """Create or refresh the single autosave a user holds for a document."""
    autosave = await get_autosave(db_session, document.id, user_id)

    if autosave is None:
        return await create_revision(db_session, document, user_id, autosave=True, registry=registry)

    autosave.title = document.title
    autosave.content = document.content
    autosave.modified_at = datetime.now(UTC)
    await db_session.commit()
    await db_session.refresh(autosave)
    return autosave


async def prune_revisions(db_session: AsyncSession, document_id: UUID, keep: int) -> int:
    """Delete the oldest manual revisions beyond ``keep``. Returns the number removed."""
    result = await db_session.execute(
        select(Revision.id)
        .where(Revision.document_id == document_id, Revision.name.not_like("%autosave%"))
        .order_by(Revision.modified_at.desc())
        .offset(keep)
    )
    stale = list(result.scalars().all())
    for revision_id in stale:
        await delete_revision(db_session, revision_id)
    if stale:
        logger.debug("Pruned %d revisions of document %s", len(stale), document_id)
    return len(stale)


async def list_revisions(
    db_session: AsyncSession,
    document_id: UUID,
    limit: int | None = None,
    meta_key: str | None = None,
    ids_only: bool = False,
    order: Order = "DESC",
) -> list[Revision] | list[UUID]:
    """List revisions for a document, newest first by default.

    Args:
        db_session: Database session
        document_id: The document to get revisions for
        limit: Maximum number of revisions (None or negative for all)
        meta_key: Only revisions that carry this builder meta key
        ids_only: Return revision ids instead of Revision objects
        order: "DESC" (newest first) or "ASC"

    Returns:
        Revisions (or their ids) ordered by modification time
    """
    query = select(Revision.id if ids_only else Revision).where(Revision.document_id == document_id)

    if meta_key:
        query = query.where(
            select(BuilderMeta.id)
            .where(BuilderMeta.object_id == Revision.id, BuilderMeta.meta_key == meta_key)
            .exists()
        )

    ordering = Revision.modified_at.asc() if order == "ASC" else Revision.modified_at.desc()
    query = query.order_by(ordering)

    if limit is not None and limit >= 0:
        query = query.limit(limit)

    result = await db_session.execute(query)
    return list(result.scalars().all())


async def get_revision(db_session: AsyncSession, revision_id: UUID) -> Revision | None:
    result = await db_session.execute(select(Revision).where(Revision.id == revision_id))
    return result.scalar_one_or_none()


async def get_revision_parent_id(db_session: AsyncSession, revision_id: UUID) -> UUID | None:
    """Return the document a revision belongs to, or None if it is not a revision."""
    result = await db_session.execute(
        select(Revision.document_id).where(Revision.id == revision_id)
    )
    return result.scalar_one_or_none()


async def restore_revision(
    db_session: AsyncSession,
    document: Document,
    revision: Revision,
    user_id: UUID | None = None,
    registry: HookRegistry = hooks,
    keep: int = -1,
    types: DocumentTypeRegistry = document_types,
) -> Document:
    """Roll a document back to a revision.

    The restored state is itself saved as a new revision before
    ``revision_restored`` fires with the document and revision ids.
    """
    document.title = revision.title
    document.content = revision.content
    await db_session.commit()
    await db_session.refresh(document)

    await save_document_revision(db_session, document, user_id, keep, registry=registry, types=types)
    await registry.do_action(REVISION_RESTORED, document.id, revision.id)

    return document


async def delete_revision(db_session: AsyncSession, revision_id: UUID) -> Revision | None:
    """Delete a revision and its builder meta.

    Returns:
        The deleted Revision, or None if no revision had that id
    """
    revision = await get_revision(db_session, revision_id)
    if revision is None:
        return None

    await meta_service.delete_meta(db_session, revision.id, commit=False)
    await db_session.delete(revision)
    await db_session.commit()
    return revision

