"""
Paragraph-aware chunking. Groups paragraph-like blocks (headings excluded); a
block over the token budget is split by the first splitter in the sentence → word
chain that can split it, so chunks never end mid-word.
"""

from chunkwise.config.chunking.models import ChunkingOptions
from chunkwise.schema.document import PARAGRAPH_TYPES, Block, DocumentStructure
from chunkwise.services.chunking.base import BaseChunkingStrategy, ChunkBuilder, require_overlap_below
from chunkwise.services.chunking.cleaners import wrap_paragraph
from chunkwise.services.chunking.errors import InvalidOptionsError
from chunkwise.services.chunking.packing import pack_greedy
from chunkwise.services.chunking.splitters import SENTENCE_THEN_WORD, split_sentences, split_with_fallback
from chunkwise.services.chunking.tokenizer import count_tokens


class ParagraphAwareStrategy(BaseChunkingStrategy):
    """Groups paragraphs together, falling back to sentence or word-level splitting if needed."""

    @property
    def strategy_id(self) -> str:
        return "paragraph-aware"

    @property
    def name(self) -> str:
        return "Paragraph-Aware"

    @property
    def description(self) -> str:
        return (
            "Groups paragraphs together, falling back to sentence or word-level splitting if needed. "
            "Best for narrative content."
        )

    @property
    def default_options(self) -> ChunkingOptions:
        return ChunkingOptions(
            max_tokens=1000,
            overlap_tokens=150,
            min_paragraphs_per_chunk=1,
            max_paragraphs_per_chunk=10,
        )

    def validate_options(self, options: ChunkingOptions) -> None:
        require_overlap_below(options, "max_tokens", "overlap_tokens")
        low, high = options.min_paragraphs_per_chunk, options.max_paragraphs_per_chunk
        if low is not None and high is not None and low > high:
            raise InvalidOptionsError(
                f"min_paragraphs_per_chunk ({low}) must not exceed max_paragraphs_per_chunk ({high})"
            )

    def _chunk(self, structure: DocumentStructure, options: ChunkingOptions, builder: ChunkBuilder) -> None:
        max_tokens = options.max_tokens
        run: list[Block] = []
        for block in structure.blocks:
            if block.type not in PARAGRAPH_TYPES:
                continue
            if count_tokens(block.text) > max_tokens:
                self._emit_run(run, options, builder)
                run = []
                self._split_oversized(block, options, builder)
            else:
                run.append(block)
        self._emit_run(run, options, builder)

    def _emit_run(self, blocks: list[Block], options: ChunkingOptions, builder: ChunkBuilder) -> None:
        """Pack consecutive blocks that each fit the budget; overlap repeats whole trailing blocks."""
        if not blocks:
            return
        sizes = [count_tokens(b.text) for b in blocks]
        groups = pack_greedy(
            sizes,
            options.max_tokens,
            options.overlap_tokens or 0,
            max_units=options.max_paragraphs_per_chunk,
            min_units=options.min_paragraphs_per_chunk or 1,
        )
        for group in groups:
            builder.add("\n".join(blocks[i].html for i in group), first_block=blocks[group[0]])

    def _split_oversized(self, block: Block, options: ChunkingOptions, builder: ChunkBuilder) -> None:
        found = split_with_fallback(block.text, SENTENCE_THEN_WORD)
        if found is None:
            # A single word: emit whole rather than cut inside it
            builder.add(block.html, first_block=block)
            return
        splitter, fragments = found
        sizes = [count_tokens(f) for f in fragments]
        groups = pack_greedy(sizes, options.max_tokens, options.overlap_tokens or 0)
        for group in groups:
            if splitter is split_sentences:
                content = "\n".join(wrap_paragraph(fragments[i]) for i in group)
            else:
                content = wrap_paragraph(" ".join(fragments[i] for i in group))
            builder.add(content, first_block=block)
