"""News summary and per-article AI summary records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from briefsnap.domain.entities._fields import optional_str, optional_timestamp, require_str
from briefsnap.domain.exceptions import DecodeError
from briefsnap.shared.utils.datetime import to_iso


class SummaryType(str, Enum):
    """Content types an article summary is generated in."""

    BRIEF = "brief"
    DETAILED = "detailed"
    KEY_POINTS = "key_points"


@dataclass(frozen=True)
class NewsSummary:
    """Latest daily briefing from `news_summaries`.

    `stories` are kept as plain maps; only their presence as a list is
    validated.
    """

    id: str
    summary: str
    timestamp: datetime | None = None
    topic: str = ""
    stories: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> NewsSummary:
        stories = data.get("stories") or []
        if not isinstance(stories, list) or not all(isinstance(s, dict) for s in stories):
            raise DecodeError("news_summary", doc_id, "'stories' must be a list of maps")
        return cls(
            id=doc_id,
            summary=require_str("news_summary", doc_id, data, "summary"),
            timestamp=optional_timestamp("news_summary", doc_id, data, "timestamp"),
            topic=optional_str("news_summary", doc_id, data, "topic"),
            stories=stories,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "summary": self.summary,
            "timestamp": to_iso(self.timestamp),
            "topic": self.topic,
            "stories": self.stories,
        }


@dataclass(frozen=True)
class ArticleSummary:
    """AI-generated summary of one article in one SummaryType."""

    article_id: str
    summary_type: SummaryType
    content: str
    generated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> ArticleSummary:
        raw_type = require_str("article_summary", doc_id, data, "type")
        try:
            summary_type = SummaryType(raw_type)
        except ValueError as e:
            raise DecodeError("article_summary", doc_id, f"unknown summary type {raw_type!r}") from e
        return cls(
            article_id=require_str("article_summary", doc_id, data, "articleId"),
            summary_type=summary_type,
            content=require_str("article_summary", doc_id, data, "content"),
            generated_at=optional_timestamp("article_summary", doc_id, data, "generatedAt"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "article_id": self.article_id,
            "summary_type": self.summary_type.value,
            "content": self.content,
            "generated_at": to_iso(self.generated_at),
        }
