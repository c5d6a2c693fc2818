"""SEO analysis and social/structured metadata for articles."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, Field

from sitefactory.quality.criteria import Criterion, combine_scores, evaluate_criteria, get_grade
from sitefactory.types import Article, CheckResult
from sitefactory.utils.text import slugify, strip_html

SECTION_WEIGHTS: dict[str, float] = {
    "title": 0.2,
    "meta": 0.2,
    "content": 0.25,
    "structure": 0.15,
    "images": 0.1,
    "url": 0.1,
}

TITLE_LENGTH = (30, 60)
META_LENGTH = (120, 160)
MAX_URL_LENGTH = 60

_POWER_WORDS = re.compile(r"essential|ultimate|complete|guide|best|top|how|why|what", re.I)
_CALL_TO_ACTION = re.compile(r"learn|discover|explore|read|find", re.I)
_DIGIT = re.compile(r"\d")
_PARAGRAPH = re.compile(r"<p>", re.I)
_HEADING = re.compile(r"<h[1-6]>", re.I)
_LIST = re.compile(r"<ul>|<ol>", re.I)
_LINK = re.compile(r"<a\s+href", re.I)
_H1 = re.compile(r"<h1[^>]*>", re.I)
_H2 = re.compile(r"<h2[^>]*>", re.I)
_H3 = re.compile(r"<h3[^>]*>", re.I)
_SLUG_CHARS = re.compile(r"^[a-z0-9-]+$")


class SiteMeta(BaseModel):
    """Site identity used in structured data and social tags."""

    name: str = "News Site"
    url: str = "https://example.com"
    logo: str = ""
    twitter_handle: str = ""


class SEOSection(BaseModel):
    score: float = 0.0
    suggestion: str | None = None
    checks: list[CheckResult] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)


class SEOAnalysis(BaseModel):
    sections: dict[str, SEOSection] = Field(default_factory=dict)
    score: float = 0.0
    grade: str = "F"
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# ── Criteria (each section totals 100) ──

_TITLE_CRITERIA = [
    Criterion(
        item="Length",
        points=30,
        check=lambda t: TITLE_LENGTH[0] <= len(t) <= TITLE_LENGTH[1],
    ),
    Criterion(item="Keywords", points=20, check=lambda t: len(t.split()) >= 3),
    Criterion(item="Power words", points=20, check=lambda t: bool(_POWER_WORDS.search(t))),
    Criterion(item="Numbers", points=15, check=lambda t: bool(_DIGIT.search(t))),
    Criterion(item="Present", points=15, check=lambda t: len(t) > 0),
]

_META_CRITERIA = [
    Criterion(
        item="Length",
        points=40,
        check=lambda e: META_LENGTH[0] <= len(e) <= META_LENGTH[1],
    ),
    Criterion(item="Keywords", points=30, check=lambda e: len(e.split()) >= 10),
    Criterion(item="Call to action", points=30, check=lambda e: bool(_CALL_TO_ACTION.search(e))),
]

_CONTENT_CRITERIA = [
    Criterion(item="Word count", points=25, check=lambda c: len(strip_html(c).split()) >= 300),
    Criterion(item="Paragraphs", points=20, check=lambda c: len(_PARAGRAPH.findall(c)) >= 5),
    Criterion(item="Headings", points=20, check=lambda c: len(_HEADING.findall(c)) >= 2),
    Criterion(item="Lists", points=15, check=lambda c: len(_LIST.findall(c)) >= 1),
    Criterion(item="Links", points=20, check=lambda c: len(_LINK.findall(c)) >= 2),
]

_STRUCTURE_CRITERIA = [
    Criterion(item="H1", points=30, check=lambda c: bool(_H1.search(c))),
    Criterion(item="H2", points=30, check=lambda c: bool(_H2.search(c))),
    Criterion(item="H3", points=20, check=lambda c: bool(_H3.search(c))),
    Criterion(
        item="Hierarchy",
        points=20,
        check=lambda c: bool(_H1.search(c)) and bool(_H2.search(c)),
    ),
]

# Alt text is not inspected, so the second half of the image score is never earned.
_IMAGE_CRITERIA = [
    Criterion(item="Featured image", points=50, check=lambda a: bool(a.image)),
    Criterion(item="Alt text", points=50, check=lambda a: False),
]

_URL_CRITERIA = [
    Criterion(item="Length", points=40, check=lambda s: len(s) <= MAX_URL_LENGTH),
    Criterion(item="Hyphenated", points=30, check=lambda s: "-" in s),
    Criterion(item="Readable", points=30, check=lambda s: bool(_SLUG_CHARS.match(s))),
]


def _length_suggestion(length: int, bounds: tuple[int, int], label: str) -> str | None:
    if length < bounds[0]:
        return f"{label} is too short"
    if length > bounds[1]:
        return f"{label} is too long"
    return None


class SEOAnalyzer:
    """Section-by-section SEO audit with a weighted overall score."""

    def analyze(self, article: Article) -> SEOAnalysis:
        title = article.title or ""
        excerpt = article.excerpt or ""
        content = article.content or ""
        slug = self.slugify(title)

        sections = {
            "title": self._section(
                title,
                _TITLE_CRITERIA,
                _length_suggestion(len(title), TITLE_LENGTH, "Title"),
                length=len(title),
            ),
            "meta": self._section(
                excerpt,
                _META_CRITERIA,
                _length_suggestion(len(excerpt), META_LENGTH, "Meta description"),
                length=len(excerpt),
            ),
            "content": self._section(
                content,
                _CONTENT_CRITERIA,
                self._content_suggestion(content),
                word_count=len(strip_html(content).split()),
            ),
            "structure": self._section(
                content, _STRUCTURE_CRITERIA, self._structure_suggestion(content)
            ),
            "images": self._section(
                article,
                _IMAGE_CRITERIA,
                "Add a featured image" if not article.image else "Add alt text to images",
            ),
            "url": self._section(
                slug,
                _URL_CRITERIA,
                "URL slug is too long" if len(slug) > MAX_URL_LENGTH else None,
                slug=slug,
            ),
        }

        score = combine_scores({name: s.score for name, s in sections.items()}, SECTION_WEIGHTS)
        issues = [s.suggestion for s in sections.values() if s.suggestion]

        recommendations: list[str] = []
        if score < 70:
            recommendations.append(
                "Overall SEO score is below optimal. Review and address the issues above."
            )
        if sections["title"].score < 80:
            recommendations.append(
                "Optimize title: Ensure it's 30-60 characters, includes keywords, "
                "and is compelling"
            )
        if sections["meta"].score < 80:
            recommendations.append(
                "Optimize meta description: Ensure it's 120-160 characters "
                "and includes a call to action"
            )
        if sections["content"].score < 70:
            recommendations.append(
                "Enhance content: Add more paragraphs, headings, and internal links"
            )

        return SEOAnalysis(
            sections=sections,
            score=score,
            grade=get_grade(score),
            issues=issues,
            recommendations=recommendations,
        )

    # ── Metadata ──

    def article_url(self, article: Article, site: SiteMeta) -> str:
        return f"{site.url.rstrip('/')}/articles/{self.slugify(article.title)}.html"

    def structured_data(self, article: Article, site: SiteMeta) -> dict[str, Any]:
        """schema.org Article JSON-LD."""
        url = self.article_url(article, site)
        return {
            "@context": "https://schema.org",
            "@type": "Article",
            "headline": article.title,
            "description": article.excerpt,
            "image": article.image or "",
            "datePublished": article.date,
            "dateModified": article.date,
            "author": {"@type": "Person", "name": article.author or "AI Analyst"},
            "publisher": {
                "@type": "Organization",
                "name": site.name,
                "logo": {"@type": "ImageObject", "url": site.logo},
            },
            "mainEntityOfPage": {"@type": "WebPage", "@id": url},
            "articleSection": article.category or "General",
        }

    def open_graph_tags(self, article: Article, site: SiteMeta) -> dict[str, str]:
        return {
            "og:type": "article",
            "og:title": article.title,
            "og:description": article.excerpt,
            "og:image": article.image or "",
            "og:url": self.article_url(article, site),
            "og:site_name": site.name,
            "article:published_time": article.date,
            "article:author": article.author or "AI Analyst",
            "article:section": article.category or "General",
        }

    def twitter_card_tags(self, article: Article, site: SiteMeta) -> dict[str, str]:
        return {
            "twitter:card": "summary_large_image",
            "twitter:title": article.title,
            "twitter:description": article.excerpt,
            "twitter:image": article.image or "",
            "twitter:site": site.twitter_handle,
        }

    @staticmethod
    def slugify(title: str) -> str:
        return slugify(title)

    # ── Helpers ──

    @staticmethod
    def _section(
        subject: Any,
        criteria: list[Criterion],
        suggestion: str | None,
        **details: Any,
    ) -> SEOSection:
        score, checks = evaluate_criteria(subject, criteria)
        return SEOSection(score=score, suggestion=suggestion, checks=checks, details=details)

    @staticmethod
    def _content_suggestion(content: str) -> str | None:
        if len(strip_html(content).split()) < 300:
            return "Content is too short (aim for 300+ words)"
        return None

    @staticmethod
    def _structure_suggestion(content: str) -> str | None:
        if not _H1.search(content):
            return "Add an H1 heading"
        if not _H2.search(content):
            return "Add H2 headings for structure"
        return None
