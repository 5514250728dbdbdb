"""Editor request endpoint, dispatching on the ``action`` form field."""

import logging

from litestar import Controller, Request, post
from litestar.response import Response
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_403_FORBIDDEN
from sqlalchemy.ext.asyncio import AsyncSession

from builder_history.controllers.helpers import build_revisions_manager
from builder_history.lib.exceptions import InvalidNonceError
from builder_history.lib.hooks import AJAX_PREFIX
from builder_history.lib.nonce import verify_nonce

logger = logging.getLogger(__name__)


class AjaxController(Controller):
    path = "/builder"

    @post("/ajax", status_code=200)
    async def dispatch(self, request: Request, db_session: AsyncSession) -> Response:
        """Run the ``ajax_<action>`` handler registered for this request."""
        form = await request.form()
        data = {key: form.get(key) for key in form.keys()}

        try:
            verify_nonce(request, data)
        except InvalidNonceError as e:
            return Response(content={"success": False, "data": str(e)}, status_code=HTTP_403_FORBIDDEN)

        action = data.get("action") or ""
        manager = await build_revisions_manager(request, db_session)
        hook_name = f"{AJAX_PREFIX}{action}"

        if not action or not manager.registry.has_filter(hook_name):
            logger.info("Rejected unknown editor action %r", action)
            return Response(content={"success": False, "data": "Unknown action"}, status_code=HTTP_400_BAD_REQUEST)

        result = await manager.registry.apply_filters(hook_name, None, data)
        return Response(content=result.to_dict(), status_code=200)
