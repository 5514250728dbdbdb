from builder_history.db.models.builder_meta import BuilderMeta
from builder_history.db.models.document import Document
from builder_history.db.models.revision import Revision
from builder_history.db.models.user import User

__all__ = ["BuilderMeta", "Document", "Revision", "User"]
