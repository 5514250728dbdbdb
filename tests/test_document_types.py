"""Tests for the document type feature registry."""

from builder_history.lib.document_types import DocumentTypeRegistry, document_types


class TestDocumentTypeRegistry:
    def test_register_and_supports(self):
        """Test registering a type with features."""
        types = DocumentTypeRegistry()
        types.register("landing", supports=["builder"])

        assert types.supports("landing", "builder")
        assert not types.supports("landing", "revisions")
        assert not types.supports("unknown", "builder")

    def test_register_merges_features(self):
        """Registering a type again adds to its features."""
        types = DocumentTypeRegistry()
        types.register("page", supports=["builder"])
        types.register("page", supports=["comments"])

        assert types.supports("page", "builder")
        assert types.supports("page", "comments")

    def test_types_by_support_in_registration_order(self):
        """Test that lookups by feature keep registration order."""
        types = DocumentTypeRegistry()
        types.register("post", supports=["builder"])
        types.register("attachment")
        types.register("page", supports=["builder"])

        assert types.types_by_support("builder") == ["post", "page"]

    def test_remove_support(self):
        """Test removing a feature from a type."""
        types = DocumentTypeRegistry()
        types.register("page", supports=["builder", "revisions"])
        types.remove_support("page", "revisions")
        types.remove_support("missing", "revisions")

        assert not types.supports("page", "revisions")

    def test_default_registry_has_builder_types(self):
        """The default registry ships page and post with builder support."""
        assert set(document_types.types_by_support("builder")) >= {"page", "post"}
