"""Simplified Flesch Reading Ease."""

from __future__ import annotations

import re

_SENTENCE_SPLIT = re.compile(r"[.!?]+\s")
_SILENT_SUFFIX = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y = re.compile(r"^y")
_VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")

EMPTY_TEXT_SCORE = 50.0


def estimate_syllables(word: str) -> int:
    """Vowel-group heuristic; every word has at least one syllable."""
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = _SILENT_SUFFIX.sub("", word)
    word = _LEADING_Y.sub("", word)
    return len(_VOWEL_GROUP.findall(word)) or 1


def flesch_reading_ease(text: str) -> float:
    """206.835 - 1.015 * words/sentence - 84.6 * syllables/word, clamped to [0, 100].

    Syllables are estimated per whitespace-separated word and summed.
    """
    sentences = [s for s in _SENTENCE_SPLIT.split(text) if s]
    words = text.split()
    if not sentences or not words:
        return EMPTY_TEXT_SCORE

    syllables = sum(estimate_syllables(w) for w in words)
    avg_sentence_length = len(words) / len(sentences)
    avg_syllables_per_word = syllables / len(words)

    score = 206.835 - 1.015 * avg_sentence_length - 84.6 * avg_syllables_per_word
    return max(0.0, min(100.0, score))
