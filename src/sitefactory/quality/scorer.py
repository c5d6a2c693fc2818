"""Article quality scoring: readability, SEO, structure and engagement."""

from __future__ import annotations

import logging
import re

from sitefactory.quality.criteria import Criterion, combine_scores, evaluate_criteria, get_grade
from sitefactory.quality.readability import flesch_reading_ease
from sitefactory.types import Article, QualityReport, QualityScores
from sitefactory.utils.text import count_words, strip_html

logger = logging.getLogger(__name__)

OVERALL_WEIGHTS: dict[str, float] = {
    "readability": 0.3,
    "seo": 0.3,
    "structure": 0.2,
    "engagement": 0.2,
}

_RECOMMENDATION_THRESHOLD = 60.0

_H1 = re.compile(r"<h1[^>]*>", re.I)
_H2 = re.compile(r"<h2[^>]*>", re.I)
_H3 = re.compile(r"<h3[^>]*>", re.I)
_HEADING = re.compile(r"<h[1-6]>", re.I)
_PARAGRAPH = re.compile(r"<p>", re.I)
_LIST_OR_QUOTE = re.compile(r"<ul>|<ol>|<blockquote>", re.I)
_LEADING_INT = re.compile(r"^\s*(\d+)")


def heading_structure_score(html: str) -> float:
    """h1 counts 0.5, h2 0.3, h3 0.2."""
    score = 0.0
    if _H1.search(html):
        score += 0.5
    if _H2.search(html):
        score += 0.3
    if _H3.search(html):
        score += 0.2
    return score


def _heading_fraction(article: Article) -> float:
    content = article.content or ""
    if not (_H1.search(content) or _H2.search(content)):
        return 0.0
    return heading_structure_score(content)


def _read_minutes(article: Article) -> int:
    match = _LEADING_INT.match(article.read_time or "")
    return int(match.group(1)) if match else 0


SEO_CRITERIA: list[Criterion] = [
    Criterion(
        item="Title length",
        points=20,
        check=lambda a: 30 <= len(a.title or "") <= 60,
        message=lambda a: f"Title should be 30-60 characters (current: {len(a.title or '')})",
    ),
    Criterion(
        item="Meta description",
        points=20,
        check=lambda a: 120 <= len(a.excerpt or "") <= 160,
        message=lambda a: (
            f"Excerpt should be 120-160 characters (current: {len(a.excerpt or '')})"
        ),
    ),
    Criterion(
        item="Content length",
        points=20,
        check=lambda a: 300 <= count_words(a.content or "") <= 5000,
        message=lambda a: (
            f"Content should be 300-5000 words (current: {count_words(a.content or '')})"
        ),
    ),
    Criterion(
        item="Heading structure",
        points=20,
        check=_heading_fraction,
        message="Add H1 and H2 headings for better structure",
        good_threshold=0.5,
    ),
    Criterion(
        item="Image presence",
        points=20,
        check=lambda a: bool(a.image),
        message="Add a featured image",
        failure_status="missing",
    ),
]

STRUCTURE_CRITERIA: list[Criterion] = [
    Criterion(item="Introduction", points=25, check=lambda a: len(a.content or "") > 100),
    Criterion(
        item="Headings", points=25, check=lambda a: len(_HEADING.findall(a.content or "")) >= 2
    ),
    Criterion(
        item="Paragraphs",
        points=25,
        check=lambda a: len(_PARAGRAPH.findall(a.content or "")) >= 3,
    ),
    Criterion(
        item="Formatting",
        points=25,
        check=lambda a: bool(_LIST_OR_QUOTE.search(a.content or "")),
    ),
]


def _title_hook(article: Article) -> float:
    title = article.title or ""
    if "?" in title or "How" in title or "Why" in title:
        return 1.0
    return 0.5 if title else 0.0


def _excerpt_hook(article: Article) -> float:
    excerpt = article.excerpt or ""
    if len(excerpt) > 50:
        return 1.0
    return 0.5 if excerpt else 0.0


ENGAGEMENT_CRITERIA: list[Criterion] = [
    Criterion(item="Title hook", points=30, check=_title_hook),
    Criterion(item="Excerpt", points=30, check=_excerpt_hook),
    Criterion(item="Category", points=20, check=lambda a: bool(a.category)),
    Criterion(item="Read time", points=20, check=lambda a: 3 <= _read_minutes(a) <= 15),
]


class QualityScorer:
    """Scores an article on four 0-100 dimensions. Pure and deterministic."""

    def score(self, article: Article) -> QualityReport:
        readability = self.score_readability(article)
        seo, seo_checks = evaluate_criteria(article, SEO_CRITERIA)
        structure, _ = evaluate_criteria(article, STRUCTURE_CRITERIA)
        engagement, _ = evaluate_criteria(article, ENGAGEMENT_CRITERIA)

        scores = QualityScores(
            readability=readability,
            seo=seo,
            structure=structure,
            engagement=engagement,
        )
        scores.overall = combine_scores(scores.model_dump(), OVERALL_WEIGHTS)

        recommendations: list[str] = []
        if scores.readability < _RECOMMENDATION_THRESHOLD:
            recommendations.append("Improve readability: Use shorter sentences and simpler words")
        if scores.seo < _RECOMMENDATION_THRESHOLD:
            recommendations.extend(
                check.message or f"Improve {check.item}"
                for check in seo_checks
                if not check.passed
            )
        if scores.structure < _RECOMMENDATION_THRESHOLD:
            recommendations.append(
                "Improve structure: Add more headings, paragraphs, and formatting"
            )
        if scores.engagement < _RECOMMENDATION_THRESHOLD:
            recommendations.append("Improve engagement: Make title and excerpt more compelling")

        return QualityReport(
            scores=scores,
            grade=get_grade(scores.overall),
            recommendations=recommendations,
            seo_checks=seo_checks,
        )

    @staticmethod
    def score_readability(article: Article) -> float:
        text = f"{article.title} {article.excerpt} {strip_html(article.content or '')}"
        return flesch_reading_ease(text)
