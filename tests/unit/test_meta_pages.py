"""Meta page generation for the static build."""

from unittest.mock import AsyncMock

from briefsnap.infrastructure.services.preview_renderer import PreviewRenderer
from scripts.generate_meta_pages import generate_meta_pages


async def test_writes_one_page_per_article(tmp_path, article_factory) -> None:
    repo = AsyncMock()
    repo.list_with_slugs = AsyncMock(
        return_value=[
            article_factory(id="a1", slug="first"),
            article_factory(id="a2", slug="../escape"),
            article_factory(id="a3", slug="second"),
        ]
    )
    written = await generate_meta_pages(repo, PreviewRenderer("https://briefsnap.com"), tmp_path, limit=10)

    assert [p.name for p in written] == ["first.html", "second.html"]
    assert sorted(p.name for p in (tmp_path / "article").iterdir()) == ["first.html", "second.html"]
    html = (tmp_path / "article" / "first.html").read_text(encoding="utf-8")
    assert 'window.location.replace("/#/article/first");' in html
    assert "https://briefsnap.com/article/first" in html
    repo.list_with_slugs.assert_awaited_once_with(10)
    assert not (tmp_path / "escape.html").exists()
