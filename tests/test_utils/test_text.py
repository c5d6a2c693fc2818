"""Tests for HTML and text helpers."""

from sitefactory.utils.text import count_words, slugify, strip_html


def test_strip_html():
    assert strip_html("<h1>Title</h1><p>Body  text</p>") == "Title Body text"


def test_strip_html_none():
    assert strip_html(None) == ""


def test_count_words():
    assert count_words("<p>one two</p><p>three</p>") == 3


def test_slugify():
    assert slugify("  Why Small Steps Win?  ") == "why-small-steps-win"


def test_slugify_truncates():
    assert len(slugify("a" * 100)) == 60


def test_slugify_truncation_drops_trailing_hyphen():
    assert slugify("word " * 20) == ("word-" * 12).rstrip("-")
