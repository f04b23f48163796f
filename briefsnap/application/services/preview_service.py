"""Social previews for link-unfurling crawlers."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from briefsnap.application.services.article_service import ArticleService
from briefsnap.domain.exceptions import BriefSnapException
from briefsnap.infrastructure.services.preview_renderer import PreviewRenderer

logger = logging.getLogger(__name__)

CRAWLER_PATTERN = re.compile(
    r"facebookexternalhit|twitterbot|WhatsApp|SkypeUriPreview|LinkedInBot|SlackBot"
    r"|TelegramBot|iMessageLinkPreview|bot|crawler|spider|scraper",
    re.IGNORECASE,
)

# Slugs become file names under static_root/article/
_SAFE_SLUG = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def is_safe_slug(slug: str) -> bool:
    return bool(_SAFE_SLUG.match(slug))


def is_crawler(user_agent: str | None) -> bool:
    return bool(user_agent) and CRAWLER_PATTERN.search(user_agent) is not None


@dataclass(frozen=True)
class PreviewResult:
    """Either a pre-generated page on disk or freshly rendered HTML."""

    html: str | None = None
    path: Path | None = None


class SocialPreviewService:
    def __init__(
        self,
        articles: ArticleService,
        renderer: PreviewRenderer,
        static_root: str | Path,
    ) -> None:
        self._articles = articles
        self._renderer = renderer
        self._static_root = Path(static_root)

    @property
    def spa_index(self) -> Path:
        return self._static_root / "index.html"

    def static_page(self, slug: str) -> Path | None:
        if not is_safe_slug(slug):
            return None
        path = self._static_root / "article" / f"{slug}.html"
        return path if path.is_file() else None

    async def preview(self, slug: str) -> PreviewResult | None:
        """Preview for a crawler, or None when the SPA should be served instead.

        A pre-generated page wins over dynamic rendering. Lookup failures are
        logged and fall back to the SPA.
        """
        static = self.static_page(slug)
        if static is not None:
            return PreviewResult(path=static)

        logger.info("Generating dynamic meta tags for article: %s", slug)
        try:
            article = await self._articles.get_article(slug)
        except BriefSnapException as e:
            logger.warning("No preview for %s: %s", slug, e.message)
            return None
        return PreviewResult(html=self._renderer.render(article))
