from builder_history.revisions.authors import AuthorCache
from builder_history.revisions.manager import (
    MAX_REVISIONS_TO_DISPLAY,
    AjaxResult,
    RevisionSaveContext,
    RevisionsManager,
)
from builder_history.revisions.protocols import ContentStore, StylesheetRegenerator

__all__ = [
    "MAX_REVISIONS_TO_DISPLAY",
    "AjaxResult",
    "AuthorCache",
    "ContentStore",
    "RevisionSaveContext",
    "RevisionsManager",
    "StylesheetRegenerator",
]
