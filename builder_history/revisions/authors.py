"""Per-listing cache of author display data."""

from dataclasses import dataclass
from uuid import UUID

from markupsafe import Markup

from builder_history.lib.avatars import get_avatar
from builder_history.revisions.protocols import ContentStore


@dataclass
class AuthorSummary:
    display_name: str
    avatar: Markup


class AuthorCache:
    """Resolves each author at most once for the lifetime of the cache.

    A fresh cache is created for every listing unless the caller passes one
    in, so nothing is shared between requests.
    """

    def __init__(self, store: ContentStore, avatar_size: int = 22) -> None:
        self.store = store
        self.avatar_size = avatar_size
        self._authors: dict[UUID | None, AuthorSummary] = {}

    def __contains__(self, author_id: UUID | None) -> bool:
        return author_id in self._authors

    async def get(self, author_id: UUID | None) -> AuthorSummary:
        if author_id not in self._authors:
            author = await self.store.get_author(author_id)
            if author is None:
                self._authors[author_id] = AuthorSummary(
                    display_name="", avatar=get_avatar(None, self.avatar_size)
                )
            else:
                self._authors[author_id] = AuthorSummary(
                    display_name=author.display_name,
                    avatar=get_avatar(
                        author.email, self.avatar_size, author.picture_url, alt=author.display_name
                    ),
                )
        return self._authors[author_id]
