"""Comment list reads (cache-first)."""

from __future__ import annotations

from briefsnap.application.fetching import cached_fetch
from briefsnap.application.interfaces import ICommentRepository
from briefsnap.domain.entities import Comment
from briefsnap.infrastructure.cache import CacheStore, Namespace, comments_key
from briefsnap.shared.telemetry import traced


class CommentService:
    def __init__(self, repo: ICommentRepository, store: CacheStore) -> None:
        self._repo = repo
        self._store = store

    @traced("comments.list")
    async def list_comments(self, article_id: str) -> list[Comment]:
        """Comments on an article, newest first. New comments show up once the entry expires."""
        return await cached_fetch(
            self._store,
            Namespace.COMMENTS,
            comments_key(article_id),
            lambda: self._repo.list_for_article(article_id),
        )
