"""LLM access: chat-completion client, prompt templates and response parsing."""

from sitefactory.llm.client import AsyncLLMClient, dry_run_response
from sitefactory.llm.prompts import PromptLoader, default_prompt, render_template
from sitefactory.llm.response_parser import (
    calculate_read_time,
    extract_json,
    parse_article_from_text,
)

__all__ = [
    "AsyncLLMClient",
    "PromptLoader",
    "calculate_read_time",
    "default_prompt",
    "dry_run_response",
    "extract_json",
    "parse_article_from_text",
    "render_template",
]
