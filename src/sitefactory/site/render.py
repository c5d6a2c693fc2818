"""Static site renderer built on a Jinja2 environment."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)
from pydantic import BaseModel, Field

from sitefactory.errors.exceptions import SiteBuildError
from sitefactory.quality.seo import SEOAnalyzer, SiteMeta
from sitefactory.types import Article

logger = logging.getLogger(__name__)

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "templates"

INDEX_TEMPLATE = "index.html.j2"
ARTICLE_TEMPLATE = "article.html.j2"
SITEMAP_TEMPLATE = "sitemap.xml.j2"
ROBOTS_TEMPLATE = "robots.txt.j2"


class BuildResult(BaseModel):
    output_dir: Path
    pages: list[Path] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class SiteBuilder:
    """Renders index, article pages, sitemap and robots.txt.

    ``templates_dir`` is searched before the bundled templates, so a site
    can override any single template. Template and file-system failures
    raise :class:`SiteBuildError`.
    """

    def __init__(
        self,
        site: SiteMeta | None = None,
        description: str = "",
        templates_dir: Path | None = None,
        seo: SEOAnalyzer | None = None,
    ) -> None:
        self._site = site or SiteMeta()
        self._description = description
        self._seo = seo or SEOAnalyzer()

        search_path = [str(BUNDLED_TEMPLATES_DIR)]
        if templates_dir is not None:
            search_path.insert(0, str(templates_dir))
        self._env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(enabled_extensions=("html", "xml", "j2")),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def env(self) -> Environment:
        return self._env

    def build(self, articles: list[Article], output_dir: Path) -> BuildResult:
        articles_dir = output_dir / "articles"
        try:
            articles_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SiteBuildError(f"Cannot create output directory: {e}", path=str(output_dir)) from e

        result = BuildResult(output_dir=output_dir)
        base = self._base_context()

        pages: list[dict[str, Any]] = []
        seen: set[str] = set()
        for article in articles:
            slug = self._seo.slugify(article.title)
            if not slug or slug in seen:
                logger.warning("Skipping article with duplicate or empty slug: %r", article.title)
                result.skipped.append(article.title)
                continue
            seen.add(slug)
            pages.append(
                {
                    "article": article,
                    "slug": slug,
                    "url": self._seo.article_url(article, self._site),
                }
            )

        for page in pages:
            article = page["article"]
            html = self._render(
                ARTICLE_TEMPLATE,
                **base,
                **page,
                structured_data=self._seo.structured_data(article, self._site),
                og_tags=self._seo.open_graph_tags(article, self._site),
                twitter_tags=self._seo.twitter_card_tags(article, self._site),
            )
            result.pages.append(self._write(articles_dir / f"{page['slug']}.html", html))

        featured = next((p for p in pages if p["article"].featured), pages[0] if pages else None)
        result.pages.append(
            self._write(
                output_dir / "index.html",
                self._render(INDEX_TEMPLATE, **base, pages=pages, featured=featured),
            )
        )
        result.pages.append(
            self._write(
                output_dir / "sitemap.xml",
                self._render(SITEMAP_TEMPLATE, **base, pages=pages),
            )
        )
        result.pages.append(
            self._write(output_dir / "robots.txt", self._render(ROBOTS_TEMPLATE, **base))
        )

        logger.info("Built %d article pages in %s", len(pages), output_dir)
        return result

    # ── Helpers ──

    def _base_context(self) -> dict[str, Any]:
        return {
            "site": self._site,
            "site_url": self._site.url.rstrip("/"),
            "description": self._description,
        }

    def _render(self, template_name: str, **context: Any) -> str:
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as e:
            raise SiteBuildError(f"Template not found: {template_name}", path=str(e)) from e
        try:
            return template.render(**context)
        except TemplateError as e:
            raise SiteBuildError(f"Failed to render {template_name}: {e}") from e

    @staticmethod
    def _write(path: Path, content: str) -> Path:
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise SiteBuildError(f"Cannot write {path}: {e}", path=str(path)) from e
        return path
