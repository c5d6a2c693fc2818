"""Topic catalog, article styles and angles, and per-article config generation."""

from __future__ import annotations

import random
from typing import Any

from pydantic import BaseModel, Field

from sitefactory.content.lenses import Lens

# ── Catalog ──

TOPIC_CATALOG: dict[str, list[str]] = {
    "nature": [
        "coastal-erosion",
        "climate-feedbacks",
        "ocean-acidification",
        "biodiversity-loss",
        "resource-depletion",
        "ecosystem-restoration",
        "sustainable-agriculture",
        "renewable-energy-transition",
        "water-security",
        "wildlife-conservation",
    ],
    "mind": [
        "attention-economy",
        "sleep-architecture",
        "memory-consolidation",
        "cognitive-load",
        "decision-fatigue",
        "mindfulness-practice",
        "neuroplasticity",
        "focus-training",
        "mental-models",
        "cognitive-biases",
    ],
    "society": [
        "polarization",
        "urban-design",
        "social-cohesion",
        "information-cascades",
        "collective-intelligence",
        "community-building",
        "civic-engagement",
        "social-capital",
        "cultural-evolution",
        "democratic-participation",
    ],
    "technology": [
        "ai-alignment",
        "algorithmic-bias",
        "network-effects",
        "platform-governance",
        "privacy-tradeoffs",
        "ethical-ai",
        "digital-divide",
        "cybersecurity",
        "data-sovereignty",
        "technological-determinism",
    ],
    "economy": [
        "incentive-design",
        "market-failures",
        "behavioral-economics",
        "value-creation",
        "systemic-risk",
        "circular-economy",
        "sharing-economy",
        "economic-inequality",
        "sustainable-growth",
        "regenerative-economics",
    ],
    "philosophy": [
        "virtue-ethics",
        "stoic-practice",
        "existential-meaning",
        "moral-development",
        "wisdom-tradition",
        "philosophical-inquiry",
        "ethics-of-care",
        "justice-theory",
        "metaphysical-foundations",
        "practical-wisdom",
    ],
    "health": [
        "preventive-medicine",
        "mental-health",
        "lifestyle-medicine",
        "wellness-practice",
        "holistic-health",
        "public-health",
        "health-equity",
        "longevity-research",
        "integrative-medicine",
        "health-literacy",
    ],
    "education": [
        "lifelong-learning",
        "critical-thinking",
        "educational-innovation",
        "personalized-learning",
        "education-equity",
        "skills-development",
        "learning-sciences",
        "pedagogical-methods",
        "educational-technology",
        "knowledge-construction",
    ],
    "communication": [
        "rhetorical-strategy",
        "persuasive-communication",
        "active-listening",
        "nonviolent-communication",
        "public-speaking",
        "narrative-persuasion",
        "digital-communication",
        "interpersonal-skills",
        "communication-ethics",
        "effective-messaging",
    ],
    "governance": [
        "democratic-institutions",
        "policy-design",
        "civic-participation",
        "transparency-accountability",
        "institutional-reform",
        "public-administration",
        "governance-models",
        "policy-innovation",
        "citizen-engagement",
        "institutional-trust",
    ],
}


class ArticleStyle(BaseModel):
    word_count: tuple[int, int]
    sections: int
    depth: str
    style: str
    read_time: tuple[int, int]


class ArticleAngle(BaseModel):
    tone: str
    focus: str
    voice: str


ARTICLE_STYLES: dict[str, ArticleStyle] = {
    "short": ArticleStyle(
        word_count=(400, 700),
        sections=2,
        depth="overview",
        style="brief, concise, actionable",
        read_time=(2, 4),
    ),
    "medium": ArticleStyle(
        word_count=(800, 1200),
        sections=3,
        depth="moderate",
        style="balanced, informative, engaging",
        read_time=(5, 7),
    ),
    "long": ArticleStyle(
        word_count=(1500, 2500),
        sections=5,
        depth="comprehensive",
        style="in-depth, detailed, thorough",
        read_time=(8, 12),
    ),
    "feature": ArticleStyle(
        word_count=(2500, 4000),
        sections=7,
        depth="deep-dive",
        style="narrative, immersive, comprehensive",
        read_time=(13, 18),
    ),
}

ARTICLE_ANGLES: dict[str, ArticleAngle] = {
    "analytical": ArticleAngle(
        tone="objective, data-driven, systematic",
        focus="analysis, patterns, implications",
        voice="expert analyst",
    ),
    "reflective": ArticleAngle(
        tone="thoughtful, contemplative, introspective",
        focus="meaning, significance, personal reflection",
        voice="wise observer",
    ),
    "practical": ArticleAngle(
        tone="actionable, direct, solution-oriented",
        focus="how-to, application, implementation",
        voice="practical guide",
    ),
    "narrative": ArticleAngle(
        tone="storytelling, engaging, human-centered",
        focus="stories, experiences, human impact",
        voice="storyteller",
    ),
    "philosophical": ArticleAngle(
        tone="deep, questioning, contemplative",
        focus="principles, values, deeper meaning",
        voice="philosopher",
    ),
    "journalistic": ArticleAngle(
        tone="factual, balanced, investigative",
        focus="reporting, context, multiple perspectives",
        voice="journalist",
    ),
}

DEFAULT_STYLE = "medium"
DEFAULT_ANGLE = "analytical"


# ── Models ──


class Topic(BaseModel):
    slug: str
    category: str = "general"
    title: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.category}: {self.title}"


class ArticleConfig(BaseModel):
    """Everything the orchestrator needs to generate one article."""

    topic: Topic
    style: str = DEFAULT_STYLE
    angle: str = DEFAULT_ANGLE
    word_count: int = 1000
    sections: int = 3
    read_time: int = 5
    lens: Lens | None = None
    perspective: int | None = None
    total_perspectives: int | None = None

    @property
    def display_name(self) -> str:
        return self.topic.title or self.topic.slug


def slug_to_title(slug: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))


class TopicManager:
    """Lookup and random selection over the topic catalog.

    Pass ``rng`` (or ``seed``) to make style, angle and topic choices
    reproducible.
    """

    def __init__(
        self,
        catalog: dict[str, list[str]] | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        catalog = catalog if catalog is not None else TOPIC_CATALOG
        self._rng = rng or random.Random(seed)
        self._by_category: dict[str, list[Topic]] = {
            category: [
                Topic(slug=slug, category=category, title=slug_to_title(slug)) for slug in slugs
            ]
            for category, slugs in catalog.items()
        }
        self._topics = [t for topics in self._by_category.values() for t in topics]
        self._next_index = 0

    @property
    def rng(self) -> random.Random:
        return self._rng

    def all_topics(self) -> list[Topic]:
        return list(self._topics)

    def categories(self) -> list[str]:
        return list(self._by_category)

    def topics_by_category(self, category: str) -> list[Topic]:
        return list(self._by_category.get(category, []))

    def topic_by_slug(self, slug: str) -> Topic | None:
        return next((t for t in self._topics if t.slug == slug), None)

    def topic_counts(self) -> dict[str, int]:
        return {category: len(topics) for category, topics in self._by_category.items()}

    @property
    def total_count(self) -> int:
        return len(self._topics)

    def random_topic(self) -> Topic:
        return self._rng.choice(self._topics)

    def next_topic(self) -> Topic:
        """Round-robin over the catalog."""
        topic = self._topics[self._next_index]
        self._next_index = (self._next_index + 1) % len(self._topics)
        return topic

    def random_style(self) -> str:
        return self._rng.choice(list(ARTICLE_STYLES))

    def random_angle(self) -> str:
        return self._rng.choice(list(ARTICLE_ANGLES))

    @staticmethod
    def article_style(name: str | None) -> ArticleStyle:
        return ARTICLE_STYLES.get(name or DEFAULT_STYLE, ARTICLE_STYLES[DEFAULT_STYLE])

    @staticmethod
    def article_angle(name: str | None) -> ArticleAngle:
        return ARTICLE_ANGLES.get(name or DEFAULT_ANGLE, ARTICLE_ANGLES[DEFAULT_ANGLE])

    def generate_article_config(
        self,
        topic: Topic | str,
        style: str | None = None,
        angle: str | None = None,
        **extra: Any,
    ) -> ArticleConfig:
        """Pick a style and angle (random when omitted) and draw word count and read time.

        An unknown style name falls back to the medium style's ranges.
        """
        if isinstance(topic, str):
            topic = self.topic_by_slug(topic) or Topic(slug=topic, title=topic)

        style_name = style or self.random_style()
        angle_name = angle or self.random_angle()
        profile = self.article_style(style_name)

        return ArticleConfig(
            topic=topic,
            style=style_name,
            angle=angle_name,
            word_count=self._rng.randint(*profile.word_count),
            sections=profile.sections,
            read_time=self._rng.randint(*profile.read_time),
            **extra,
        )
