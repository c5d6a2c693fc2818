"""sitefactory: static content site generator driven by a multi-stage LLM pipeline."""

from sitefactory.types import Article, QualityReport, StageOutput, TokenUsage

__version__ = "0.1.0"

__all__ = [
    "Article",
    "QualityReport",
    "StageOutput",
    "TokenUsage",
]
