"""DTOs for article feed and recommendations."""

from dataclasses import dataclass, field
from typing import Any

from briefsnap.domain.entities import Article


@dataclass(frozen=True)
class ArticlePage:
    """One page of the article feed.

    next_cursor is an opaque token for the following page; None when the
    page came back short.
    """

    articles: list[Article]
    has_more: bool
    next_cursor: str | None = None
    from_cache: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "articles": [a.to_dict() for a in self.articles],
            "has_more": self.has_more,
            "next_cursor": self.next_cursor,
        }


@dataclass(frozen=True)
class RelatedArticles:
    """Up to three recommendations and how they were picked ('popular', 'recent' or '')."""

    articles: list[Article] = field(default_factory=list)
    recommendation_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "articles": [a.to_dict() for a in self.articles],
            "recommendation_type": self.recommendation_type,
        }
