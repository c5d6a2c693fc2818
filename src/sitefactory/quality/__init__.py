"""Article quality and SEO scoring."""

from sitefactory.quality.criteria import Criterion, combine_scores, evaluate_criteria, get_grade
from sitefactory.quality.readability import estimate_syllables, flesch_reading_ease
from sitefactory.quality.scorer import QualityScorer
from sitefactory.quality.seo import SEOAnalysis, SEOAnalyzer, SiteMeta

__all__ = [
    "Criterion",
    "QualityScorer",
    "SEOAnalysis",
    "SEOAnalyzer",
    "SiteMeta",
    "combine_scores",
    "estimate_syllables",
    "evaluate_criteria",
    "flesch_reading_ease",
    "get_grade",
]
