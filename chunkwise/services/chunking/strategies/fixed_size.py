"""
Fixed-size chunking. Packs whole blocks under a token budget with a word-level
overlap tail; oversized blocks fall back to sentence packing.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup

from chunkwise.config.chunking.models import ChunkingOptions
from chunkwise.schema.document import Block, DocumentStructure
from chunkwise.services.chunking.base import BaseChunkingStrategy, ChunkBuilder, require_overlap_below
from chunkwise.services.chunking.cleaners import element_text, html_to_text, wrap_paragraph
from chunkwise.services.chunking.packing import pack_greedy
from chunkwise.services.chunking.splitters import split_sentences
from chunkwise.services.chunking.tokenizer import count_tokens

_HEADING_TAG_RE = re.compile(r"^h[1-6]$")


@dataclass(slots=True)
class FixedSizePiece:
    """Content of one fixed-size chunk and the source block it starts with."""

    content: str
    first_block: Block | None


def first_heading_text(content: str) -> str | None:
    """Text of the first h1–h6 element in content, if any."""
    heading = BeautifulSoup(content, "html.parser").find(_HEADING_TAG_RE)
    if heading is None:
        return None
    return element_text(heading) or None


def fixed_size_pieces(blocks: Sequence[Block], max_tokens: int, overlap_tokens: int) -> list[FixedSizePiece]:
    """
    Greedy block packing. Only whole block markup moves between chunks; the
    overlap seed is the last overlap_tokens // 2 words of the previous chunk's text.
    """
    pieces: list[FixedSizePiece] = []
    buf: list[str] = []
    buf_tokens = 0
    buf_first: Block | None = None
    overlap_words = overlap_tokens // 2

    for block in blocks:
        markup = block.html.strip()
        block_tokens = count_tokens(block.text)

        if block_tokens > max_tokens:
            if buf:
                pieces.append(FixedSizePiece("\n".join(buf), buf_first))
            sentences = split_sentences(block.text)
            if sentences is None:
                # No sentence boundary: emit whole, never truncate
                pieces.append(FixedSizePiece(markup, block))
                buf, buf_tokens, buf_first = [], 0, None
                continue
            sizes = [count_tokens(s) for s in sentences]
            groups = pack_greedy(sizes, max_tokens)
            for group in groups[:-1]:
                pieces.append(FixedSizePiece(wrap_paragraph(" ".join(sentences[i] for i in group)), block))
            last = groups[-1]
            buf = [wrap_paragraph(" ".join(sentences[i] for i in last))]
            buf_tokens = sum(sizes[i] for i in last)
            buf_first = block
            continue

        if buf and buf_tokens + block_tokens > max_tokens:
            flushed = "\n".join(buf)
            pieces.append(FixedSizePiece(flushed, buf_first))
            tail = html_to_text(flushed).split()[-overlap_words:] if overlap_words else []
            buf = [wrap_paragraph(" ".join(tail))] if tail else []
            buf.append(markup)
            buf_tokens = count_tokens(html_to_text("\n".join(buf)))
            buf_first = block
        else:
            buf.append(markup)
            buf_tokens += block_tokens
            if buf_first is None:
                buf_first = block

    if buf:
        pieces.append(FixedSizePiece("\n".join(buf), buf_first))
    return pieces


class FixedSizeStrategy(BaseChunkingStrategy):
    """Token-budgeted chunking that respects block boundaries but ignores heading hierarchy."""

    @property
    def strategy_id(self) -> str:
        return "fixed-size"

    @property
    def name(self) -> str:
        return "Fixed Size"

    @property
    def description(self) -> str:
        return "Token-based chunking with configurable size and overlap. Respects HTML block boundaries."

    @property
    def default_options(self) -> ChunkingOptions:
        return ChunkingOptions(max_tokens=1000, overlap_tokens=150)

    def validate_options(self, options: ChunkingOptions) -> None:
        require_overlap_below(options, "max_tokens", "overlap_tokens")

    def _chunk(self, structure: DocumentStructure, options: ChunkingOptions, builder: ChunkBuilder) -> None:
        for piece in fixed_size_pieces(structure.blocks, options.max_tokens, options.overlap_tokens):
            builder.add(
                piece.content,
                first_heading_text(piece.content) or "Section",
                first_block=piece.first_block,
            )
