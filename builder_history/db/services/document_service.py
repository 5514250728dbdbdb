"""Document service: loading documents and persisting builder saves."""

import json
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from builder_history import __version__
from builder_history.db.models import Document
from builder_history.db.services import meta_service, revision_service
from builder_history.lib.document_types import DocumentTypeRegistry, document_types
from builder_history.lib.hooks import HookRegistry, BUILDER_AFTER_SAVE, BUILDER_BEFORE_SAVE, hooks

AUTOSAVE_STATUS = "autosave"


async def get_document_by_id(db_session: AsyncSession, document_id: UUID) -> Document | None:
    result = await db_session.execute(select(Document).where(Document.id == document_id))
    return result.scalar_one_or_none()


async def create_document(
    db_session: AsyncSession,
    title: str,
    content: str = "",
    type: str = "page",
    status: str = "draft",
    user_id: UUID | None = None,
) -> Document:
    document = Document(title=title, content=content, type=type, status=status, user_id=user_id)
    db_session.add(document)
    await db_session.commit()
    await db_session.refresh(document)
    return document


def encode_builder_data(data: Any) -> str:
    """Serialize editor elements for storage in ``_builder_data``."""
    if isinstance(data, str):
        return data
    return json.dumps(data, separators=(",", ":"))


async def save_builder_data(
    db_session: AsyncSession,
    document: Document,
    data: Any,
    status: str = "draft",
    user_id: UUID | None = None,
    keep: int = -1,
    registry: HookRegistry = hooks,
    types: DocumentTypeRegistry = document_types,
):
    """Persist a builder save for a document.

    Fires ``builder_before_save(status, has_changes)`` before anything is
    written. Autosaves land on the user's autosave revision and leave the
    document untouched; every other status updates the document and lets the
    revision service decide whether to snapshot it.

    Returns:
        The object the data was written to (the document or its autosave)
    """
    encoded = encode_builder_data(data)
    target_id = document.id
    if status == AUTOSAVE_STATUS:
        autosave = await revision_service.get_autosave(db_session, document.id, user_id)
        if autosave is not None:
            target_id = autosave.id

    stored = await meta_service.get_plain_builder_data(db_session, target_id)
    has_changes = stored != encoded

    await registry.do_action(BUILDER_BEFORE_SAVE, status, has_changes)

    if status == AUTOSAVE_STATUS:
        target = await revision_service.put_autosave(db_session, document, user_id, registry=registry)
    else:
        target = document
        document.status = status
        await db_session.commit()

    await meta_service.update_meta(db_session, target.id, meta_service.BUILDER_DATA_KEY, encoded, commit=False)
    await meta_service.update_meta(db_session, target.id, meta_service.BUILDER_VERSION_KEY, __version__, commit=False)
    await meta_service.update_meta(
        db_session, target.id, meta_service.BUILDER_EDIT_MODE_KEY, meta_service.EDIT_MODE_BUILDER, commit=False
    )
    await db_session.commit()

    if target is document:
        await revision_service.save_document_revision(
            db_session, document, user_id, keep, registry=registry, types=types
        )

    await registry.do_action(BUILDER_AFTER_SAVE, document.id, data)
    return target
