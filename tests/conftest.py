from unittest.mock import AsyncMock

import pytest

from sitefactory.config import hierarchy
from sitefactory.types import Article


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's config files and API keys out of every test."""
    for env_key in hierarchy._ENV_MAP:
        monkeypatch.delenv(env_key, raising=False)
    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def no_sleep():
    return AsyncMock()


@pytest.fixture
def sample_article():
    """A well-formed article with headings, paragraphs and a list."""
    paragraph = (
        "<p>Teams that track their work in small steps learn faster. "
        "They see problems early and fix them before they grow.</p>"
    )
    content = (
        "<h1>Why Small Steps Win</h1>"
        + paragraph * 3
        + "<h2>What to measure</h2>"
        + "<ul><li>Lead time</li><li>Error rate</li></ul>"
        + "<h3>Getting started</h3>"
        + paragraph * 2
    )
    return Article(
        title="How Small Teams Ship Better Software Every Week",
        excerpt=(
            "Learn how small teams use short feedback loops to ship better software, "
            "with practical steps you can apply to your own work this week."
        ),
        content=content,
        category="Technology",
        read_time="5 min read",
    )


@pytest.fixture
def sample_lenses_yaml(tmp_path):
    """Write a two-lens YAML file and return its path."""
    content = """
lenses:
  analytical:
    name: Analytical
    description: Looks at the data
    tone: objective
    focus: [patterns, data]
    question: What does the data say?
    voice: analyst
  practical:
    name: Practical
    description: Step-by-step guidance
    tone: direct
    focus: [steps]
    question: How do we do it?
    voice: guide
combinations:
  comprehensive: [analytical, practical]
category_priorities:
  technology: [practical, analytical]
"""
    path = tmp_path / "lenses.yaml"
    path.write_text(content)
    return path
