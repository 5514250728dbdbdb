"""Per-document stylesheets generated from builder data.

Each builder element may carry ``custom_css`` in its settings. The keyword
``selector`` inside that CSS is replaced with the element's scoped selector,
and the combined result is written to ``post-<document id>.css``. Generation
status is recorded in the document's ``_builder_css`` meta.
"""

import json
import logging
import time
from collections.abc import Iterator
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from builder_history.db.services import meta_service
from builder_history.lib import observability
from builder_history.lib.storage import StorageBackend

logger = logging.getLogger(__name__)

SELECTOR_KEYWORD = "selector"


def stylesheet_key(document_id: UUID) -> str:
    return f"post-{document_id}.css"


def wrapper_selector(document_id: UUID) -> str:
    return f".builder-{document_id}"


def _walk_elements(elements: list[dict[str, Any]]) -> Iterator[dict[str, Any]]:
    for element in elements:
        yield element
        yield from _walk_elements(element.get("elements") or [])


def render_css(document_id: UUID, elements: list[dict[str, Any]], page_settings: dict[str, Any] | None = None) -> str:
    """Build the stylesheet text for a document's element tree."""
    wrapper = wrapper_selector(document_id)
    rules: list[str] = []

    page_css = (page_settings or {}).get("custom_css")
    if page_css:
        rules.append(page_css.replace(SELECTOR_KEYWORD, wrapper).strip())

    for element in _walk_elements(elements):
        css = (element.get("settings") or {}).get("custom_css")
        if not css:
            continue
        scoped = f"{wrapper} .builder-element-{element.get('id')}"
        rules.append(css.replace(SELECTOR_KEYWORD, scoped).strip())

    return "\n".join(rules)


def _load_json(raw: str | None, default):
    if not raw:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Ignoring unparseable builder JSON", exc_info=True)
        return default


class StylesheetService:
    """Regenerates a document's stylesheet into a storage backend."""

    def __init__(self, db_session: AsyncSession, storage: StorageBackend) -> None:
        self.db_session = db_session
        self.storage = storage

    async def update(self, document_id: UUID) -> None:
        with observability.span("stylesheet.update", document_id=str(document_id)):
            elements = _load_json(await meta_service.get_plain_builder_data(self.db_session, document_id), [])
            page_settings = _load_json(
                await meta_service.get_meta(self.db_session, document_id, meta_service.BUILDER_PAGE_SETTINGS_KEY),
                {},
            )
            css = render_css(document_id, elements if isinstance(elements, list) else [], page_settings)
            key = stylesheet_key(document_id)

            if css:
                stored = await self.storage.put(key, css.encode(), "text/css")
                status = {
                    "status": "file",
                    "time": int(time.time()),
                    "url": stored.url,
                    "hash": stored.content_hash,
                }
            else:
                await self.storage.delete(key)
                status = {"status": "empty", "time": int(time.time())}

            await meta_service.update_meta(
                self.db_session, document_id, meta_service.BUILDER_CSS_KEY, json.dumps(status)
            )
            logger.debug("Regenerated stylesheet for document %s (%s)", document_id, status["status"])
