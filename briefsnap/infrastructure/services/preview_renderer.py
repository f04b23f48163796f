"""Social-preview HTML: Open Graph and Twitter Card tags for one article (Jinja)."""

from __future__ import annotations

from jinja2 import Environment, Template

from briefsnap.core.constants import DEFAULT_ARTICLE_DESCRIPTION
from briefsnap.domain.entities import Article
from briefsnap.shared.utils.datetime import to_iso

# Context: article, description, article_url, image_url, redirect_url,
# site_name, twitter_handle, published_time
_PREVIEW_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{{ article.title }} | {{ site_name }}</title>
    <meta name="description" content="{{ description }}" />
    <link rel="canonical" href="{{ article_url }}" />

    <meta property="og:title" content="{{ article.title }}" />
    <meta property="og:description" content="{{ description }}" />
    <meta property="og:type" content="article" />
    <meta property="og:url" content="{{ article_url }}" />
    <meta property="og:site_name" content="{{ site_name }}" />
    <meta property="og:locale" content="en_US" />
    <meta property="og:image" content="{{ image_url }}" />
    <meta property="og:image:secure_url" content="{{ image_url }}" />
    <meta property="og:image:alt" content="{{ article.title }}" />
    <meta property="og:image:width" content="1200" />
    <meta property="og:image:height" content="630" />
{%- if published_time %}
    <meta property="article:published_time" content="{{ published_time }}" />
{%- endif %}
{%- if article.topic %}
    <meta property="article:section" content="{{ article.topic }}" />
{%- endif %}

    <meta name="twitter:card" content="summary_large_image" />
    <meta name="twitter:site" content="{{ twitter_handle }}" />
    <meta name="twitter:title" content="{{ article.title }}" />
    <meta name="twitter:description" content="{{ description }}" />
    <meta name="twitter:image" content="{{ image_url }}" />
    <meta name="twitter:image:alt" content="{{ article.title }}" />

    <script>
        window.location.replace({{ redirect_url|tojson }});
    </script>
    <meta http-equiv="refresh" content="0; url={{ redirect_url }}" />
</head>
<body>
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 50px auto; padding: 20px;">
        <h1>{{ article.title }}</h1>
{%- if article.img_url %}
        <img src="{{ article.img_url }}" alt="{{ article.title }}" style="max-width: 100%; height: auto; margin: 20px 0;" />
{%- endif %}
        <p>{{ description }}</p>
        <p><a href="{{ redirect_url }}" style="color: #3b82f6;">Continue reading on {{ site_name }} &rarr;</a></p>
    </div>
</body>
</html>
"""


class PreviewRenderer:
    """Renders the crawler-facing page for an article.

    Used by the social-preview route (redirect to the article URL) and by
    the meta page generator (redirect to the hash route).
    """

    def __init__(
        self,
        base_url: str,
        site_name: str = "BriefSnap",
        twitter_handle: str = "@briefsnap",
        template: str = _PREVIEW_TEMPLATE,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._site_name = site_name
        self._twitter_handle = twitter_handle
        self._env = Environment(autoescape=True)
        self._template: Template = self._env.from_string(template)

    def article_url(self, slug: str) -> str:
        return f"{self._base_url}/article/{slug}"

    def hash_route(self, slug: str) -> str:
        return f"/#/article/{slug}"

    def render(self, article: Article, redirect_url: str | None = None) -> str:
        """Render the page; redirect_url defaults to the canonical article URL."""
        article_url = self.article_url(article.slug)
        return self._template.render(
            article=article,
            description=article.description or DEFAULT_ARTICLE_DESCRIPTION,
            article_url=article_url,
            image_url=article.img_url or f"{self._base_url}/logo512.png",
            redirect_url=redirect_url or article_url,
            site_name=self._site_name,
            twitter_handle=self._twitter_handle,
            published_time=to_iso(article.timestamp),
        )
