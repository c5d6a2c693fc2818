"""Article generation pipeline."""

from sitefactory.pipeline.generator import ArticleGenerator
from sitefactory.pipeline.stages import DEFAULT_STAGES, FULL_STAGES, validate_stage_output

__all__ = ["ArticleGenerator", "DEFAULT_STAGES", "FULL_STAGES", "validate_stage_output"]
