"""Pre-generate social-preview pages for the static site build.

Writes <out>/article/<slug>.html for the newest articles so crawlers get
Open Graph / Twitter Card tags without a database round trip. Each page
redirects readers to the SPA hash route (/#/article/<slug>).

Usage:
    python -m scripts.generate_meta_pages [out_dir]
out_dir defaults to STATIC_ROOT (build/). Requires Firestore credentials
(FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH).
"""

import asyncio
import logging
import sys
from pathlib import Path

from briefsnap.application.interfaces import IArticleRepository
from briefsnap.application.services.preview_service import is_safe_slug
from briefsnap.core.config import get_settings
from briefsnap.core.constants import SITEMAP_ARTICLE_LIMIT
from briefsnap.infrastructure.firebase import close_firebase, init_firebase
from briefsnap.infrastructure.firebase.repositories import FirestoreArticleRepository
from briefsnap.infrastructure.services.preview_renderer import PreviewRenderer
from briefsnap.shared.telemetry import setup_logging

logger = logging.getLogger("scripts.generate_meta_pages")


async def generate_meta_pages(
    repo: IArticleRepository,
    renderer: PreviewRenderer,
    out_dir: Path,
    limit: int = SITEMAP_ARTICLE_LIMIT,
) -> list[Path]:
    """Write one page per article; return the written paths."""
    article_dir = out_dir / "article"
    article_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for article in await repo.list_with_slugs(limit):
        if not is_safe_slug(article.slug):
            logger.warning("Skipping article %s: slug %r is not a valid file name", article.id, article.slug)
            continue
        path = article_dir / f"{article.slug}.html"
        path.write_text(
            renderer.render(article, redirect_url=renderer.hash_route(article.slug)),
            encoding="utf-8",
        )
        written.append(path)
        logger.info("Generated meta page for: %s", article.slug)
    return written


async def main() -> None:
    setup_logging()
    settings = get_settings()
    out_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(settings.static_root)

    client = init_firebase(settings)
    if client is None:
        print("Firestore is not configured", file=sys.stderr)
        sys.exit(1)
    try:
        renderer = PreviewRenderer(settings.site_base_url, settings.site_name, settings.twitter_handle)
        written = await generate_meta_pages(FirestoreArticleRepository(client), renderer, out_dir)
    finally:
        await close_firebase(client)
    print(f"Done. Generated {len(written)} meta page(s) in {out_dir / 'article'}")


if __name__ == "__main__":
    asyncio.run(main())
