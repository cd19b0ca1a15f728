"""
Sliding-window chunking. Overlapping windows over the document's whitespace-delimited
units; source markup is discarded and each window is re-wrapped as a paragraph.
"""

from collections.abc import Sequence

from chunkwise.config.chunking.models import ChunkingOptions
from chunkwise.schema.document import Block, DocumentStructure
from chunkwise.services.chunking.base import BaseChunkingStrategy, ChunkBuilder, require_overlap_below
from chunkwise.services.chunking.cleaners import wrap_paragraph
from chunkwise.services.chunking.splitters import ends_sentence
from chunkwise.services.chunking.tokenizer import count_tokens


def _find_sentence_boundary(units: Sequence[str], end: int, start: int) -> int:
    """Snap a window end back to the nearest sentence-ending unit, else forward; else keep end."""
    for i in range(end - 1, start - 1, -1):
        if ends_sentence(units[i]):
            return i + 1
    for i in range(end, len(units)):
        if ends_sentence(units[i]):
            return i + 1
    return end


def window_spans(
    units: Sequence[str],
    window_size: int,
    overlap_size: int,
    preserve_sentence_boundaries: bool = False,
) -> list[tuple[int, int]]:
    """
    (start, end) unit offsets of each window. Starts advance by window_size - overlap_size,
    never past the previous end (no gaps) and always strictly forward; the last window
    reaches the end of the stream.
    """
    n = len(units)
    step = max(1, window_size - overlap_size)
    spans: list[tuple[int, int]] = []
    start = 0
    while start < n:
        end = min(start + window_size, n)
        if preserve_sentence_boundaries and end < n:
            end = _find_sentence_boundary(units, end, start)
        spans.append((start, end))
        if end >= n:
            break
        next_start = min(start + step, end)
        # Ensure we make progress (avoid infinite loop)
        if next_start <= start:
            next_start = start + 1
        start = next_start
    return spans


class SlidingWindowStrategy(BaseChunkingStrategy):
    """Overlapping windows with configurable size and overlap, measured in words."""

    @property
    def strategy_id(self) -> str:
        return "sliding-window"

    @property
    def name(self) -> str:
        return "Sliding Window"

    @property
    def description(self) -> str:
        return (
            "Creates overlapping chunks with configurable window and overlap sizes. "
            "Best for technical documents where context spanning boundaries is important."
        )

    @property
    def default_options(self) -> ChunkingOptions:
        return ChunkingOptions(
            window_size=1000,
            overlap_size=200,
            preserve_word_boundaries=True,
            preserve_sentence_boundaries=False,
        )

    def validate_options(self, options: ChunkingOptions) -> None:
        require_overlap_below(options, "window_size", "overlap_size")

    def _chunk(self, structure: DocumentStructure, options: ChunkingOptions, builder: ChunkBuilder) -> None:
        stream = "\n\n".join(b.text for b in structure.blocks)
        if count_tokens(stream) <= options.window_size:
            content = "\n".join(wrap_paragraph(b.text) for b in structure.blocks)
            builder.add(content, first_block=structure.blocks[0], window_index=0)
            return

        # Units are whole words, so word boundaries always hold
        units: list[str] = []
        owners: list[Block] = []
        for block in structure.blocks:
            for word in block.text.split():
                units.append(word)
                owners.append(block)

        spans = window_spans(
            units,
            options.window_size,
            options.overlap_size or 0,
            bool(options.preserve_sentence_boundaries),
        )
        for start, end in spans:
            builder.add(
                wrap_paragraph(" ".join(units[start:end])),
                first_block=owners[start],
                window_index=start,
            )
