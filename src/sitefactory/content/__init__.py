"""Topics, lenses, voices and the content orchestrator."""

from sitefactory.content.lenses import Lens, LensSystem, Perspective
from sitefactory.content.orchestrator import ContentOrchestrator, placeholder_article
from sitefactory.content.topics import (
    ARTICLE_ANGLES,
    ARTICLE_STYLES,
    TOPIC_CATALOG,
    ArticleConfig,
    Topic,
    TopicManager,
)
from sitefactory.content.validation import (
    ArticleValidation,
    sanitize_topic,
    validate_article,
    validate_topic,
)
from sitefactory.content.voices import VoiceProfile, VoiceSystem

__all__ = [
    "ARTICLE_ANGLES",
    "ARTICLE_STYLES",
    "TOPIC_CATALOG",
    "ArticleConfig",
    "ArticleValidation",
    "ContentOrchestrator",
    "Lens",
    "LensSystem",
    "Perspective",
    "Topic",
    "TopicManager",
    "VoiceProfile",
    "VoiceSystem",
    "placeholder_article",
    "sanitize_topic",
    "validate_article",
    "validate_topic",
]
