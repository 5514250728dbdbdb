"""Builder editor endpoints: bootstrap settings, saves and revision restores."""

from typing import Any
from uuid import UUID

from litestar import Controller, Request, get, post
from litestar.exceptions import NotFoundException, PermissionDeniedException
from litestar.response import Response
from sqlalchemy.ext.asyncio import AsyncSession

from builder_history.config import get_settings
from builder_history.controllers.helpers import build_revisions_manager, get_session_user_id
from builder_history.db.services import document_service, revision_service
from builder_history.lib.exceptions import InvalidNonceError
from builder_history.lib.hooks import BUILDER_SAVE_RETURN_DATA, EDITOR_LOCALIZE_SETTINGS
from builder_history.lib.nonce import create_nonce, verify_nonce


async def _get_document_or_404(db_session: AsyncSession, document_id: UUID):
    document = await document_service.get_document_by_id(db_session, document_id)
    if not document:
        raise NotFoundException("Document not found")
    return document


def _check_nonce(request: Request, data: dict[str, Any]) -> None:
    try:
        verify_nonce(request, data)
    except InvalidNonceError as e:
        raise PermissionDeniedException(str(e)) from e


class EditorController(Controller):
    path = "/builder/documents"

    @get("/{document_id:uuid}/settings")
    async def editor_settings(
        self, request: Request, db_session: AsyncSession, document_id: UUID
    ) -> dict[str, Any]:
        """Bootstrap settings for opening a document in the editor."""
        document = await _get_document_or_404(db_session, document_id)
        manager = await build_revisions_manager(request, db_session, current_document_id=document.id)

        settings = {
            "document_id": str(document.id),
            "document_type": document.type,
            "nonce": create_nonce(request),
        }
        return await manager.registry.apply_filters(EDITOR_LOCALIZE_SETTINGS, settings, document.id)

    @post("/{document_id:uuid}/save", status_code=200)
    async def save(
        self,
        request: Request,
        db_session: AsyncSession,
        document_id: UUID,
        data: dict[str, Any],
    ) -> Response:
        """Save builder data and report the resulting revision history."""
        _check_nonce(request, data)
        document = await _get_document_or_404(db_session, document_id)
        manager = await build_revisions_manager(request, db_session, current_document_id=document.id)

        status = data.get("status") or document.status
        await document_service.save_builder_data(
            db_session,
            document,
            data.get("elements", []),
            status=status,
            user_id=get_session_user_id(request),
            keep=get_settings().revisions.revisions_to_keep,
            registry=manager.registry,
        )

        return_data = await manager.registry.apply_filters(
            BUILDER_SAVE_RETURN_DATA, {"status": status}, document.id
        )
        return Response(content={"success": True, "data": return_data}, status_code=200)

    @post("/{document_id:uuid}/revisions/{revision_id:uuid}/restore", status_code=200)
    async def restore(
        self,
        request: Request,
        db_session: AsyncSession,
        document_id: UUID,
        revision_id: UUID,
        data: dict[str, Any],
    ) -> Response:
        """Roll a document back to one of its revisions."""
        _check_nonce(request, data)
        document = await _get_document_or_404(db_session, document_id)

        revision = await revision_service.get_revision(db_session, revision_id)
        if not revision or revision.document_id != document.id:
            raise NotFoundException("Revision not found")

        manager = await build_revisions_manager(request, db_session, current_document_id=document.id)
        await revision_service.restore_revision(
            db_session,
            document,
            revision,
            get_session_user_id(request),
            registry=manager.registry,
            keep=get_settings().revisions.revisions_to_keep,
        )

        return Response(
            content={"success": True, "data": {"revisions": await manager.get_revisions(document.id)}},
            status_code=200,
        )
