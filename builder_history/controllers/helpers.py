"""Shared helpers for the editor controllers."""

from uuid import UUID

from litestar import Request
from sqlalchemy.ext.asyncio import AsyncSession

from builder_history.config import get_settings
from builder_history.db.services.content_store import SQLAlchemyContentStore
from builder_history.lib.hooks import INIT, HookRegistry
from builder_history.lib.stylesheets import StylesheetService
from builder_history.revisions import RevisionsManager

SESSION_USER_ID = "user_id"
AJAX_HEADER = "x-requested-with"
AJAX_HEADER_VALUE = "xmlhttprequest"


def is_ajax(request: Request) -> bool:
    """True for asynchronous editor requests (``X-Requested-With: XMLHttpRequest``)."""
    return request.headers.get(AJAX_HEADER, "").lower() == AJAX_HEADER_VALUE


def get_session_user_id(request: Request) -> UUID | None:
    user_id = request.session.get(SESSION_USER_ID)
    return UUID(user_id) if user_id else None


async def build_revisions_manager(
    request: Request,
    db_session: AsyncSession,
    current_document_id: UUID | None = None,
) -> RevisionsManager:
    """Build the request's revision manager around a fresh hook registry and run ``init``."""
    settings = get_settings()
    registry = HookRegistry()

    manager = RevisionsManager(
        store=SQLAlchemyContentStore(db_session, settings.revisions.revisions_to_keep),
        stylesheets=StylesheetService(db_session, request.app.state.stylesheet_storage),
        registry=registry,
        config=settings.revisions,
        current_document_id=current_document_id,
    )
    manager.register(is_ajax=is_ajax(request))
    await registry.do_action(INIT)
    return manager
