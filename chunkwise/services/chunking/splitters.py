"""
Fallback splitters for units that exceed the token budget. Each splitter is a pure
function returning fragments, or None when it cannot split the text. Chains are
tried in order and the first success wins.
"""

import re
from collections.abc import Callable, Sequence

Splitter = Callable[[str], list[str] | None]

_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+")
_SENTENCE_END_RE = re.compile(r"[.!?]['\")\]]*$")


def split_sentences(text: str) -> list[str] | None:
    """Split on sentence boundaries (period, !, ? followed by whitespace). None if only one sentence."""
    if not text or not text.strip():
        return None
    parts = [p.strip() for p in _SENTENCE_RE.split(text) if p.strip()]
    return parts if len(parts) > 1 else None


def split_words(text: str) -> list[str] | None:
    """Split on whitespace. Never cuts inside a word; None for a single word."""
    if not text:
        return None
    words = text.split()
    return words if len(words) > 1 else None


def sentences_or_whole(text: str) -> list[str]:
    """Sentences of text, or the stripped text itself when it has no internal boundary."""
    parts = split_sentences(text)
    if parts is not None:
        return parts
    stripped = text.strip()
    return [stripped] if stripped else []


def ends_sentence(unit: str) -> bool:
    """True when a whitespace-delimited unit closes a sentence."""
    return bool(_SENTENCE_END_RE.search(unit))


SENTENCE_THEN_WORD: tuple[Splitter, ...] = (split_sentences, split_words)


def split_with_fallback(text: str, chain: Sequence[Splitter]) -> tuple[Splitter, list[str]] | None:
    """Run splitters in order; return (splitter, fragments) from the first that succeeds."""
    for splitter in chain:
        fragments = splitter(text)
        if fragments:
            return splitter, fragments
    return None
