"""Builder meta storage for documents and revisions."""

from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from builder_history.db.models import BuilderMeta

BUILDER_META_PREFIX = "_builder"
BUILDER_DATA_KEY = "_builder_data"
BUILDER_EDIT_MODE_KEY = "_builder_edit_mode"
BUILDER_VERSION_KEY = "_builder_version"
BUILDER_PAGE_SETTINGS_KEY = "_builder_page_settings"
BUILDER_CSS_KEY = "_builder_css"

EDIT_MODE_BUILDER = "builder"

# Derived per-object state that must never travel with a snapshot
_UNCOPIED_KEYS = frozenset({BUILDER_CSS_KEY})


async def get_meta(db_session: AsyncSession, object_id: UUID, meta_key: str) -> str | None:
    """Get a single meta value, or None if the key is not set."""
    result = await db_session.execute(
        select(BuilderMeta.meta_value).where(
            BuilderMeta.object_id == object_id,
            BuilderMeta.meta_key == meta_key,
        )
    )
    return result.scalar_one_or_none()


async def get_all_meta(db_session: AsyncSession, object_id: UUID) -> dict[str, str]:
    """Get every meta key/value pair stored for an object."""
    result = await db_session.execute(
        select(BuilderMeta).where(BuilderMeta.object_id == object_id)
    )
    return {row.meta_key: row.meta_value for row in result.scalars().all()}


async def update_meta(
    db_session: AsyncSession,
    object_id: UUID,
    meta_key: str,
    meta_value: str,
    commit: bool = True,
) -> BuilderMeta:
    """Insert or replace a meta value."""
    result = await db_session.execute(
        select(BuilderMeta).where(
            BuilderMeta.object_id == object_id,
            BuilderMeta.meta_key == meta_key,
        )
    )
    row = result.scalar_one_or_none()

    if row is None:
        row = BuilderMeta(object_id=object_id, meta_key=meta_key, meta_value=meta_value)
        db_session.add(row)
    else:
        row.meta_value = meta_value

    if commit:
        await db_session.commit()
    return row


async def delete_meta(
    db_session: AsyncSession,
    object_id: UUID,
    meta_key: str | None = None,
    commit: bool = True,
) -> int:
    """Delete one meta key, or every key when ``meta_key`` is None.

    Returns:
        Number of rows removed
    """
    query = delete(BuilderMeta).where(BuilderMeta.object_id == object_id)
    if meta_key is not None:
        query = query.where(BuilderMeta.meta_key == meta_key)

    result = await db_session.execute(query)
    if commit:
        await db_session.commit()
    return result.rowcount or 0


async def is_built_with_builder(db_session: AsyncSession, object_id: UUID) -> bool:
    return bool(await get_meta(db_session, object_id, BUILDER_EDIT_MODE_KEY))


async def set_built_with_builder(db_session: AsyncSession, object_id: UUID, is_builder: bool) -> None:
    """Mark an object as built with the builder, or clear the mark."""
    if is_builder:
        await update_meta(db_session, object_id, BUILDER_EDIT_MODE_KEY, EDIT_MODE_BUILDER)
    else:
        await delete_meta(db_session, object_id, BUILDER_EDIT_MODE_KEY)


async def copy_builder_meta(db_session: AsyncSession, from_id: UUID, to_id: UUID) -> list[str]:
    """Copy every builder meta key from one object to another, values unchanged.

    Returns:
        The copied keys
    """
    source = await get_all_meta(db_session, from_id)
    copied = []
    for meta_key, meta_value in source.items():
        if not meta_key.startswith(BUILDER_META_PREFIX) or meta_key in _UNCOPIED_KEYS:
            continue
        await update_meta(db_session, to_id, meta_key, meta_value, commit=False)
        copied.append(meta_key)

    await db_session.commit()
    return copied


async def get_plain_builder_data(db_session: AsyncSession, object_id: UUID) -> str | None:
    """Return the stored builder data blob exactly as saved."""
    return await get_meta(db_session, object_id, BUILDER_DATA_KEY)
