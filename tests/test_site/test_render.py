"""Tests for the static site builder."""

import json
import re

import pytest

from sitefactory.errors.exceptions import SiteBuildError
from sitefactory.quality.seo import SiteMeta
from sitefactory.site.render import SiteBuilder
from sitefactory.types import Article

SITE = SiteMeta(name="Example News", url="https://news.example")


def _article(title: str, **kwargs) -> Article:
    return Article(title=title, excerpt=f"About {title}.", content=f"<p>{title} body</p>", **kwargs)


@pytest.fixture
def builder():
    return SiteBuilder(site=SITE, description="Daily reading")


class TestBuild:
    def test_outputs(self, builder, tmp_path, sample_article):
        out = tmp_path / "dist"
        result = builder.build([sample_article, _article("Second Story")], out)

        assert (out / "index.html").is_file()
        assert (out / "sitemap.xml").is_file()
        assert (out / "robots.txt").is_file()
        assert (out / "articles" / "how-small-teams-ship-better-software-every-week.html").is_file()
        assert (out / "articles" / "second-story.html").is_file()
        assert len(result.pages) == 5
        assert result.skipped == []

    def test_article_page_metadata(self, builder, tmp_path, sample_article):
        sample_article.image = "/images/header.jpg"
        builder.build([sample_article], tmp_path)
        html = (tmp_path / "articles" / "how-small-teams-ship-better-software-every-week.html").read_text()

        assert "<title>How Small Teams Ship Better Software Every Week | Example News</title>" in html
        assert '<meta property="og:type" content="article">' in html
        assert '<meta name="twitter:card" content="summary_large_image">' in html
        assert "<h1>Why Small Steps Win</h1>" in html
        assert 'src="/images/header.jpg"' in html

        ld = re.search(r'<script type="application/ld\+json">(.*?)</script>', html, re.S).group(1)
        data = json.loads(ld)
        assert data["@type"] == "Article"
        assert data["mainEntityOfPage"]["@id"] == (
            "https://news.example/articles/how-small-teams-ship-better-software-every-week.html"
        )

    def test_titles_escaped(self, builder, tmp_path):
        builder.build([_article("Cats & <Dogs>")], tmp_path)
        html = (tmp_path / "articles" / "cats-dogs.html").read_text()
        assert "<title>Cats &amp; &lt;Dogs&gt; | Example News</title>" in html

    def test_index_lists_featured_first(self, builder, tmp_path):
        articles = [_article("First Story"), _article("Featured Story", featured=True)]
        builder.build(articles, tmp_path)
        html = (tmp_path / "index.html").read_text()

        assert html.index("Featured Story") < html.index("First Story")
        assert html.count('href="articles/featured-story.html"') == 1
        assert 'href="articles/first-story.html"' in html
        assert "Daily reading" in html

    def test_sitemap_and_robots(self, builder, tmp_path):
        builder.build([_article("First Story")], tmp_path)
        sitemap = (tmp_path / "sitemap.xml").read_text()
        assert "<loc>https://news.example/</loc>" in sitemap
        assert "<loc>https://news.example/articles/first-story.html</loc>" in sitemap

        robots = (tmp_path / "robots.txt").read_text()
        assert "User-agent: *" in robots
        assert "Sitemap: https://news.example/sitemap.xml" in robots

    def test_duplicate_and_empty_slugs_skipped(self, builder, tmp_path):
        result = builder.build(
            [_article("Same Title"), _article("Same Title"), _article("!!!")], tmp_path
        )
        assert result.skipped == ["Same Title", "!!!"]
        assert len(list((tmp_path / "articles").iterdir())) == 1

    def test_empty_site(self, builder, tmp_path):
        result = builder.build([], tmp_path)
        assert (tmp_path / "index.html").is_file()
        assert len(result.pages) == 3


class TestTemplates:
    def test_user_template_overrides_bundled(self, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "robots.txt.j2").write_text("User-agent: *\nDisallow: /\n")
        out = tmp_path / "out"

        SiteBuilder(site=SITE, templates_dir=templates).build([], out)

        assert (out / "robots.txt").read_text().startswith("User-agent: *\nDisallow: /")
        assert "<urlset" in (out / "sitemap.xml").read_text()

    def test_missing_template_raises(self, tmp_path):
        builder = SiteBuilder(site=SITE)
        builder.env.loader.searchpath = [str(tmp_path / "empty")]
        with pytest.raises(SiteBuildError, match="Template not found"):
            builder.build([], tmp_path / "out")

    def test_broken_template_raises(self, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "robots.txt.j2").write_text("{{ no_such_variable }}")
        builder = SiteBuilder(site=SITE, templates_dir=templates)
        with pytest.raises(SiteBuildError, match="robots.txt.j2"):
            builder.build([], tmp_path / "out")

    def test_unwritable_output(self, builder, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(SiteBuildError):
            builder.build([], blocker)
