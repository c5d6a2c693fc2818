from sitefactory.images.generator import (
    ImageGenerator,
    extract_keywords,
    generate_image_prompt,
    supported_sizes,
)

__all__ = ["ImageGenerator", "extract_keywords", "generate_image_prompt", "supported_sizes"]
