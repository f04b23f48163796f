"""Article domain records.

Articles are read-only to this service except for the view counter, which
is incremented in the database and never in a cached record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from briefsnap.domain.entities._fields import (
    optional_int,
    optional_str,
    optional_str_list,
    optional_timestamp,
    require_str,
)
from briefsnap.domain.exceptions import DecodeError
from briefsnap.shared.utils.datetime import to_iso

_KIND = "article"


@dataclass(frozen=True)
class Article:
    """A published article from the `articles` collection."""

    id: str
    slug: str
    title: str
    description: str = ""
    content: str = ""
    img_url: str = ""
    topic: str = ""
    keywords: list[str] = field(default_factory=list)
    timestamp: datetime | None = None
    view_count: int = 0

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> Article:
        """Parse a Firestore field map. Raises DecodeError if malformed."""
        view_count = optional_int(_KIND, doc_id, data, "viewCount")
        if view_count < 0:
            raise DecodeError(_KIND, doc_id, "'viewCount' must be non-negative")
        content = optional_str(_KIND, doc_id, data, "content") or optional_str(
            _KIND, doc_id, data, "full_article"
        )
        return cls(
            id=doc_id,
            slug=require_str(_KIND, doc_id, data, "slug"),
            title=require_str(_KIND, doc_id, data, "title"),
            description=optional_str(_KIND, doc_id, data, "description"),
            content=content,
            img_url=optional_str(_KIND, doc_id, data, "img_url"),
            topic=optional_str(_KIND, doc_id, data, "topic"),
            keywords=optional_str_list(_KIND, doc_id, data, "keywords"),
            timestamp=optional_timestamp(_KIND, doc_id, data, "timestamp"),
            view_count=view_count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "img_url": self.img_url,
            "topic": self.topic,
            "keywords": list(self.keywords),
            "timestamp": to_iso(self.timestamp),
            "view_count": self.view_count,
        }


@dataclass(frozen=True)
class SitemapEntry:
    """Slug, title and timestamp of one article, as listed on the sitemap.

    Stored as JSON in the durable cache, so it round-trips through
    to_dict()/from_dict().
    """

    slug: str
    title: str = ""
    timestamp: datetime | None = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> SitemapEntry:
        return cls(
            slug=require_str("sitemap_entry", doc_id, data, "slug"),
            title=optional_str("sitemap_entry", doc_id, data, "title"),
            timestamp=optional_timestamp("sitemap_entry", doc_id, data, "timestamp"),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SitemapEntry:
        return cls.from_document(data.get("slug") or "", data)

    def to_dict(self) -> dict[str, Any]:
        return {"slug": self.slug, "title": self.title, "timestamp": to_iso(self.timestamp)}
