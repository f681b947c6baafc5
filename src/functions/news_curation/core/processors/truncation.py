"""Length enforcement for generated summary fields.

Both helpers leave text that already fits untouched, so applying them twice
gives the same result as applying them once.
"""

from __future__ import annotations

import re

_SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+")

# Hard cuts back off to a comma or a space only when one is close to the cut.
_COMMA_WINDOW = 20
_SPACE_WINDOW = 10


def truncate_at_sentence(text: str, max_length: int) -> str:
    """Keep as many leading whole sentences as fit within ``max_length``.

    Returns an empty string when even the first sentence is too long.
    """

    if len(text) <= max_length:
        return text

    kept = ""
    for match in _SENTENCE_PATTERN.finditer(text):
        sentence = match.group(0)
        if len(kept) + len(sentence) > max_length:
            break
        kept += sentence
    return kept.strip()


def truncate_with_hard_cut(text: str, max_length: int) -> str:
    """Sentence-boundary truncation with a word-safe hard cut as last resort."""

    if len(text) <= max_length:
        return text

    by_sentence = truncate_at_sentence(text, max_length)
    if by_sentence:
        return by_sentence

    cut = text[:max_length].strip()
    last_comma = cut.rfind(",")
    last_space = cut.rfind(" ")
    if last_comma > 0 and last_comma > len(cut) - _COMMA_WINDOW:
        return cut[:last_comma].strip()
    if last_space > 0 and last_space > len(cut) - _SPACE_WINDOW:
        return cut[:last_space].strip()
    return cut
