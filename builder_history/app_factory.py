"""Litestar application factory.

Run with ``litestar --app builder_history.app_factory:create_app run``.
"""

import hashlib
import logging
from pathlib import Path

from advanced_alchemy.config import EngineConfig
from advanced_alchemy.extensions.litestar import (
    AsyncSessionConfig,
    SQLAlchemyAsyncConfig,
    SQLAlchemyPlugin,
)
from litestar import Litestar
from litestar.datastructures import State
from litestar.exceptions import HTTPException
from litestar.middleware.session.client_side import CookieBackendConfig

from builder_history.config import Settings, get_settings
from builder_history.controllers import AjaxController, EditorController
from builder_history.db.base import Base
from builder_history.lib import observability
from builder_history.lib.exceptions import http_exception_handler, internal_server_error_handler
from builder_history.lib.storage import LocalStorageBackend

logger = logging.getLogger(__name__)


def build_db_config(settings: Settings) -> SQLAlchemyAsyncConfig:
    """Build the SQLAlchemy async database configuration."""
    if "sqlite" in settings.db.url:
        engine_config = EngineConfig(echo=settings.db.echo)
    else:
        engine_config = EngineConfig(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.pool_overflow,
            pool_timeout=settings.db.pool_timeout,
            echo=settings.db.echo,
        )

    return SQLAlchemyAsyncConfig(
        connection_string=settings.db.url,
        metadata=Base.metadata,
        create_all=settings.db.create_all,
        session_config=AsyncSessionConfig(expire_on_commit=False),
        engine_config=engine_config,
    )


def build_session_config(settings: Settings) -> CookieBackendConfig:
    """Client-side encrypted session holding the editor nonce and user id."""
    session_secret = hashlib.sha256(settings.secret_key.encode()).digest()
    return CookieBackendConfig(
        secret=session_secret,
        max_age=60 * 60 * 24 * 7,
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
    )


def create_app(settings: Settings | None = None) -> Litestar:
    """Create and configure the Litestar application."""
    settings = settings or get_settings()
    observability.configure(settings)

    storage = LocalStorageBackend(Path(settings.storage.local_path), settings.storage.store_name)
    logger.debug("Writing stylesheets to %s", settings.storage.local_path)

    app = Litestar(
        route_handlers=[AjaxController, EditorController],
        plugins=[SQLAlchemyPlugin(config=build_db_config(settings))],
        middleware=[build_session_config(settings).middleware],
        state=State({"stylesheet_storage": storage}),
        exception_handlers={
            HTTPException: http_exception_handler,
            Exception: internal_server_error_handler,
        },
        debug=settings.debug,
    )

    return app
