"""Registry of document types and the editor features each one supports."""

from collections import defaultdict

BUILDER_FEATURE = "builder"
REVISIONS_FEATURE = "revisions"


class DocumentTypeRegistry:
    """Maps document type names to their supported features."""

    def __init__(self) -> None:
        self._supports: dict[str, set[str]] = defaultdict(set)

    def register(self, name: str, supports: list[str] | tuple[str, ...] = ()) -> None:
        """Register a document type, merging features into any existing registration."""
        self._supports[name].update(supports)

    def add_support(self, name: str, feature: str) -> None:
        self._supports[name].add(feature)

    def remove_support(self, name: str, feature: str) -> None:
        self._supports.get(name, set()).discard(feature)

    def supports(self, name: str, feature: str) -> bool:
        return feature in self._supports.get(name, ())

    def types_by_support(self, feature: str) -> list[str]:
        """Return type names supporting ``feature`` in registration order."""
        return [name for name, features in self._supports.items() if feature in features]

    def clear(self) -> None:
        self._supports.clear()


document_types = DocumentTypeRegistry()
document_types.register("page", supports=[BUILDER_FEATURE])
document_types.register("post", supports=[BUILDER_FEATURE])
