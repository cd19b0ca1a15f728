from __future__ import annotations

import pytest

from chunkwise.config.chunking.models import ChunkingOptions
from chunkwise.config.chunking.static import coerce_options, merge_options, resolve_chunking_options
from chunkwise.services.chunking.errors import InvalidOptionsError
from chunkwise.services.chunking.strategies import (
    FixedSizeStrategy,
    HeadingAwareStrategy,
    ParagraphAwareStrategy,
    SlidingWindowStrategy,
)


def test_options_accept_camel_case_and_collect_unknown_keys() -> None:
    options = coerce_options({"maxTokens": 300, "overlap_tokens": 20, "colour": "blue"})

    assert options.max_tokens == 300
    assert options.overlap_tokens == 20
    assert options.custom_params == {"colour": "blue"}


def test_merge_overrides_only_fields_the_caller_set() -> None:
    defaults = ChunkingOptions(max_tokens=1000, overlap_tokens=150, custom_params={"a": 1})

    merged = merge_options(defaults, {"maxTokens": 400, "b": 2})

    assert merged.max_tokens == 400
    assert merged.overlap_tokens == 150
    assert merged.custom_params == {"a": 1, "b": 2}
    assert defaults.max_tokens == 1000


def test_merge_ignores_explicit_none_and_accepts_options_instance() -> None:
    defaults = ChunkingOptions(window_size=1000, overlap_size=200)

    merged = merge_options(defaults, ChunkingOptions(window_size=500, overlap_size=None))

    assert merged.window_size == 500
    assert merged.overlap_size == 200
    assert merge_options(defaults, None) == defaults


@pytest.mark.parametrize(
    "overrides",
    [
        {"maxTokens": 0},
        {"max_tokens": 20000},
        {"overlapTokens": -1},
        {"subChunkingStrategy": "word"},
        {"minParagraphsPerChunk": 0},
        {"windowSize": "wide"},
    ],
)
def test_out_of_range_fields_raise_invalid_options(overrides: dict) -> None:
    with pytest.raises(InvalidOptionsError):
        coerce_options(overrides)


def test_strategy_defaults() -> None:
    fixed = FixedSizeStrategy().default_options
    heading = HeadingAwareStrategy().default_options
    paragraph = ParagraphAwareStrategy().default_options
    window = SlidingWindowStrategy().default_options

    assert (fixed.max_tokens, fixed.overlap_tokens) == (1000, 150)
    assert (heading.min_chunk_tokens, heading.sub_chunking_strategy) == (200, "paragraph")
    assert (paragraph.min_paragraphs_per_chunk, paragraph.max_paragraphs_per_chunk) == (1, 10)
    assert (window.window_size, window.overlap_size) == (1000, 200)
    assert window.preserve_word_boundaries is True
    assert window.preserve_sentence_boundaries is False


@pytest.mark.parametrize(
    ("strategy", "overrides"),
    [
        (FixedSizeStrategy(), {"maxTokens": 100, "overlapTokens": 100}),
        (HeadingAwareStrategy(), {"maxTokens": 100, "overlapTokens": 120}),
        (ParagraphAwareStrategy(), {"minParagraphsPerChunk": 5, "maxParagraphsPerChunk": 2}),
        (SlidingWindowStrategy(), {"windowSize": 200, "overlapSize": 200}),
    ],
)
def test_strategy_validation_rejects_inconsistent_options(strategy, overrides: dict) -> None:
    with pytest.raises(InvalidOptionsError):
        resolve_chunking_options(strategy, overrides)


def test_resolve_returns_merged_options() -> None:
    merged = resolve_chunking_options(SlidingWindowStrategy(), {"overlapSize": 50})

    assert merged.window_size == 1000
    assert merged.overlap_size == 50
