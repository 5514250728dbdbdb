"""Editor request nonces.

The editor receives a nonce in its bootstrap settings and sends it back with
every request, either as the ``_nonce`` form field or the ``X-Builder-Nonce``
header. Unlike form CSRF tokens, the nonce stays valid for the whole editing
session so that concurrent editor requests do not invalidate one another.
"""

from __future__ import annotations

import hmac
import secrets
from typing import TYPE_CHECKING, Any, Mapping

from builder_history.lib.exceptions import InvalidNonceError

if TYPE_CHECKING:
    from litestar import Request

NONCE_SESSION_KEY = "_builder_nonce"
NONCE_FIELD_NAME = "_nonce"
NONCE_HEADER_NAME = "x-builder-nonce"


def create_nonce(request: Request) -> str:
    """Return the session's editor nonce, creating it on first use."""
    if NONCE_SESSION_KEY not in request.session:
        request.session[NONCE_SESSION_KEY] = secrets.token_urlsafe(32)
    return request.session[NONCE_SESSION_KEY]


def verify_nonce(request: Request, data: Mapping[str, Any]) -> None:
    """Check the submitted nonce against the session.

    Raises:
        InvalidNonceError: if no nonce is stored or the submitted one differs
    """
    submitted = data.get(NONCE_FIELD_NAME) or request.headers.get(NONCE_HEADER_NAME, "")
    stored = request.session.get(NONCE_SESSION_KEY, "")

    if not stored or not hmac.compare_digest(str(submitted), str(stored)):
        raise InvalidNonceError("Invalid nonce")
