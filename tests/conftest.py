"""Shared pytest fixtures."""

import os
from datetime import datetime, timedelta, UTC
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from builder_history.config import RevisionsConfig
from builder_history.lib.document_types import DocumentTypeRegistry
from builder_history.lib.hooks import HookRegistry
from builder_history.revisions import RevisionsManager
from builder_history.revisions.protocols import AuthorRecord, RevisionRecord

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def registry():
    """Create a fresh HookRegistry for each test."""
    return HookRegistry()


@pytest.fixture
def types():
    """A document type registry with one builder type and one plain type."""
    registry = DocumentTypeRegistry()
    registry.register("page", supports=["builder"])
    registry.register("attachment")
    return registry


@pytest.fixture
def document():
    doc = MagicMock()
    doc.id = uuid4()
    doc.type = "page"
    return doc


@pytest.fixture
def mock_store(document):
    """A ContentStore double that knows a single document."""
    store = AsyncMock()

    async def _get_document(document_id):
        return document if document_id == document.id else None

    store.get_document = AsyncMock(side_effect=_get_document)
    store.get_revisions = AsyncMock(return_value=[])
    store.get_revision_parent_id = AsyncMock(return_value=None)
    store.is_built_with_builder = AsyncMock(return_value=False)
    store.set_built_with_builder = AsyncMock()
    store.copy_builder_meta = AsyncMock()
    store.get_plain_builder_data = AsyncMock(return_value=None)
    store.delete_revision = AsyncMock(return_value=None)
    store.revisions_enabled = AsyncMock(return_value=True)
    store.get_author = AsyncMock(
        side_effect=lambda author_id: AuthorRecord(
            id=author_id, display_name=f"Author {str(author_id)[:4]}", email="author@example.com"
        )
    )
    return store


@pytest.fixture
def mock_stylesheets():
    stylesheets = AsyncMock()
    stylesheets.update = AsyncMock()
    return stylesheets


@pytest.fixture
def manager(mock_store, mock_stylesheets, registry, types):
    return RevisionsManager(
        store=mock_store,
        stylesheets=mock_stylesheets,
        registry=registry,
        config=RevisionsConfig(),
        types=types,
        clock=lambda: NOW,
    )


@pytest.fixture
def make_revision(document):
    """Factory for RevisionRecords belonging to the test document."""

    def _make(name="revision", author_id=None, age=timedelta(minutes=5), document_id=None):
        revision_id = uuid4()
        doc_id = document_id or document.id
        return RevisionRecord(
            id=revision_id,
            document_id=doc_id,
            author_id=author_id,
            name=f"{doc_id}-{name}-v1" if name in ("revision", "autosave") else name,
            modified_at=NOW - age,
        )

    return _make


@pytest.fixture
def mock_request_factory():
    """Factory fixture that returns mock requests with a session dict and headers."""

    def _make(session=None, form_data=None, headers=None):
        request = MagicMock()
        request.session = session if session is not None else {}
        request.headers = headers or {}
        if form_data is not None:
            async def _form():
                return form_data
            request.form = _form
        return request

    return _make


@pytest.fixture
def now():
    """The fixed "current time" the manager fixture's clock reports."""
    return NOW
