from __future__ import annotations

import pytest

from chunkwise.services.chunking import tokenizer


class _WhitespaceEncoding:
    """Stand-in encoding: one token per whitespace-delimited word."""

    def encode(self, text: str, disallowed_special=()) -> list[str]:
        return text.split()


@pytest.fixture
def word_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make count_tokens return word counts so size expectations are exact."""
    monkeypatch.setattr(tokenizer, "_tiktoken_encoding", _WhitespaceEncoding())
    monkeypatch.setattr(tokenizer, "_encoding_unavailable", False)
