"""Revision coordinator for builder documents.

The host owns revisions: it creates, stores, prunes and deletes them. This
module only keeps the builder's data in step with them by reacting to host
hooks:

* ``revision_created``: copy the document's builder meta onto the new revision
* ``revision_restored``: copy it back, sync the builder flag, rebuild the CSS
* ``builder_before_save``: make builder saves always produce a revision
* ``editor_localize_settings`` / ``builder_save_return_data``: feed the
  editor's revision history panel
* ``ajax_get_revision_data`` / ``ajax_delete_revision``: the panel's two
  request endpoints

A manager is built per request around that request's hook registry, so the
save latch and the author cache never outlive the request.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any
from uuid import UUID

from builder_history.config import RevisionsConfig
from builder_history.db.services.meta_service import BUILDER_DATA_KEY
from builder_history.lib import observability
from builder_history.lib.document_types import (
    BUILDER_FEATURE,
    REVISIONS_FEATURE,
    DocumentTypeRegistry,
    document_types,
)
from builder_history.lib.exceptions import RevisionDeleteError
from builder_history.lib.hooks import (
    AJAX_DELETE_REVISION,
    AJAX_GET_REVISION_DATA,
    BUILDER_BEFORE_SAVE,
    BUILDER_SAVE_RETURN_DATA,
    EDITOR_LOCALIZE_SETTINGS,
    INIT,
    REVISION_CREATED,
    REVISION_POST_HAS_CHANGED,
    REVISION_RESTORED,
    HookRegistry,
)
from builder_history.lib.humanize import format_revision_date, human_time_diff
from builder_history.revisions import strings
from builder_history.revisions.authors import AuthorCache
from builder_history.revisions.protocols import ContentStore, StylesheetRegenerator

logger = logging.getLogger(__name__)

MAX_REVISIONS_TO_DISPLAY = 100


@dataclass
class AjaxResult:
    """Outcome of an editor request: ``{"success": ..., "data": ...}`` on the wire."""

    success: bool
    data: Any = None

    @classmethod
    def ok(cls, data: Any = None) -> AjaxResult:
        return cls(success=True, data=data)

    @classmethod
    def error(cls, message: str) -> AjaxResult:
        return cls(success=False, data=message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload["data"] = self.data
        return payload


@dataclass
class RevisionSaveContext:
    """Per-request state for builder saves.

    ``force_revision`` latches once a save with changes has been seen and
    stays set for the rest of the request.
    """

    force_revision: bool = False


def merge_recursive(base: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` with ``updates`` merged in, descending into nested dicts."""
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_recursive(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


def _parse_id(raw: Any) -> UUID | None:
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except ValueError:
        return None


class RevisionsManager:
    """Keeps builder data in step with host revisions."""

    def __init__(
        self,
        store: ContentStore,
        stylesheets: StylesheetRegenerator,
        registry: HookRegistry,
        config: RevisionsConfig | None = None,
        types: DocumentTypeRegistry = document_types,
        context: RevisionSaveContext | None = None,
        current_document_id: UUID | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.stylesheets = stylesheets
        self.registry = registry
        self.config = config or RevisionsConfig(max_to_display=MAX_REVISIONS_TO_DISPLAY)
        self.types = types
        self.context = context or RevisionSaveContext()
        self.current_document_id = current_document_id
        self.clock = clock or (lambda: datetime.now(UTC))

    def register(self, is_ajax: bool = False) -> None:
        """Subscribe to host hooks. Safe to call more than once."""
        self.registry.add_action(REVISION_RESTORED, self.restore_revision, priority=10)
        self.registry.add_action(INIT, self.add_revision_support_for_all_document_types, priority=9999)
        self.registry.add_filter(EDITOR_LOCALIZE_SETTINGS, self.editor_settings, priority=10)
        self.registry.add_filter(BUILDER_SAVE_RETURN_DATA, self.ajax_save_builder_data, priority=10)
        self.registry.add_action(BUILDER_BEFORE_SAVE, self.db_before_save, priority=10)

        if is_ajax:
            self.registry.add_filter(AJAX_GET_REVISION_DATA, self._revision_data_filter, priority=10)
            self.registry.add_filter(AJAX_DELETE_REVISION, self._delete_revision_filter, priority=10)

    def handle_revision(self) -> None:
        """Make the current request store a revision, with builder data, on save."""
        self.context.force_revision = True
        self.registry.add_filter(REVISION_POST_HAS_CHANGED, self.force_post_has_changed)
        self.registry.add_action(REVISION_CREATED, self.save_revision)

    def force_post_has_changed(self, has_changed: bool, *args: Any) -> bool:
        return has_changed or self.context.force_revision

    async def get_revisions(
        self,
        document_id: UUID | None = None,
        query_args: Mapping[str, Any] | None = None,
        parse_result: bool = True,
        authors: AuthorCache | None = None,
    ) -> list[Any]:
        """List a document's revisions.

        Args:
            document_id: Document to list; falls back to the current document
            query_args: Overrides for the host query. Defaults are
                ``posts_per_page`` = the display cap and ``meta_key`` =
                ``_builder_data`` (only revisions carrying builder data).
            parse_result: False returns the host's sequence untouched
            authors: Author cache to reuse; a fresh one is used otherwise

        Returns:
            Summaries ``{id, author, date, type, gravatar}`` in host order,
            the raw host sequence, or ``[]`` if the document does not exist
        """
        document_id = document_id or self.current_document_id
        if not document_id:
            return []

        document = await self.store.get_document(document_id)
        if document is None or not getattr(document, "id", None):
            return []

        args = {
            "posts_per_page": self.config.max_to_display,
            "meta_key": BUILDER_DATA_KEY,
            **(query_args or {}),
        }
        posts = await self.store.get_revisions(document.id, args)

        if not parse_result:
            return posts

        if authors is None:
            authors = AuthorCache(self.store, self.config.avatar_size)

        now = self.clock()
        revisions = []
        for revision in posts:
            author = await authors.get(revision.author_id)
            revisions.append(
                {
                    "id": revision.id,
                    "author": author.display_name,
                    "date": strings.DATE_TEMPLATE.format(
                        human_time=human_time_diff(revision.modified_at, now),
                        date=format_revision_date(revision.modified_at, self.config.timezone),
                    ),
                    "type": "autosave" if revision.is_autosave else "revision",
                    "gravatar": author.avatar,
                }
            )

        return revisions

    async def save_revision(self, revision_id: UUID) -> None:
        """Copy builder meta from a revision's document onto the revision."""
        parent_id = await self.store.get_revision_parent_id(revision_id)

        if not parent_id or not await self.store.is_built_with_builder(parent_id):
            return

        await self.store.copy_builder_meta(parent_id, revision_id)
        logger.debug("Captured builder data of %s into revision %s", parent_id, revision_id)

    async def restore_revision(self, document_id: UUID, revision_id: UUID) -> None:
        """Bring a document's builder state back in line with a restored revision."""
        with observability.span("revisions.restore", document_id=str(document_id), revision_id=str(revision_id)):
            is_built_with_builder = await self.store.is_built_with_builder(revision_id)

            await self.store.set_built_with_builder(document_id, is_built_with_builder)

            if not is_built_with_builder:
                return

            await self.store.copy_builder_meta(revision_id, document_id)
            await self.stylesheets.update(document_id)

        observability.info("Restored builder revision", document_id=str(document_id), revision_id=str(revision_id))

    async def on_revision_data_request(self, data: Mapping[str, Any]) -> AjaxResult:
        """Return the raw builder data stored on a revision.

        The caller is responsible for verifying the request nonce first.
        """
        if data.get("id") is None:
            return AjaxResult.error(strings.MISSING_REVISION_ID)

        revision_id = _parse_id(data["id"])
        revision = await self.store.get_plain_builder_data(revision_id) if revision_id else None

        if not revision:
            return AjaxResult.error(strings.INVALID_REVISION)

        return AjaxResult.ok(revision)

    async def on_delete_revision_request(self, data: Mapping[str, Any]) -> AjaxResult:
        """Ask the host to delete a revision.

        The caller is responsible for verifying the request nonce first.
        """
        if not data.get("id"):
            return AjaxResult.error(strings.MISSING_ID)

        revision_id = _parse_id(data["id"])
        deleted = None
        if revision_id is not None:
            try:
                deleted = await self.store.delete_revision(revision_id)
            except RevisionDeleteError:
                logger.warning("Host failed to delete revision %s", revision_id, exc_info=True)

        if deleted:
            return AjaxResult.ok()
        return AjaxResult.error(strings.CANNOT_DELETE_REVISION)

    def add_revision_support_for_all_document_types(self) -> None:
        for document_type in self.types.types_by_support(BUILDER_FEATURE):
            self.types.add_support(document_type, REVISIONS_FEATURE)

    async def ajax_save_builder_data(self, return_data: dict[str, Any], document_id: UUID) -> dict[str, Any]:
        """Attach the latest revision and every revision id to a builder save response."""
        latest_revision = await self.get_revisions(document_id, {"posts_per_page": 1})

        all_revision_ids = await self.get_revisions(document_id, {"fields": "ids"}, parse_result=False)

        if latest_revision:
            return_data["last_revision"] = latest_revision[0]
            return_data["revisions_ids"] = all_revision_ids

        return return_data

    def db_before_save(self, status: str, has_changes: bool) -> None:
        if has_changes:
            self.handle_revision()

    async def editor_settings(self, settings: dict[str, Any], document_id: UUID | None) -> dict[str, Any]:
        """Add revision history data and strings to the editor bootstrap settings."""
        revisions_enabled = False
        if document_id:
            document = await self.store.get_document(document_id)
            revisions_enabled = document is not None and await self.store.revisions_enabled(document)

        return merge_recursive(
            settings,
            {
                "revisions": await self.get_revisions(document_id),
                "revisions_enabled": revisions_enabled,
                "i18n": strings.editor_i18n(self.config.help_url),
            },
        )

    async def _revision_data_filter(self, response: AjaxResult | None, data: Mapping[str, Any]) -> AjaxResult:
        return await self.on_revision_data_request(data)

    async def _delete_revision_filter(self, response: AjaxResult | None, data: Mapping[str, Any]) -> AjaxResult:
        return await self.on_delete_revision_request(data)
