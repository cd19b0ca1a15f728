"""
Heading-aware chunking. Chunks start at heading boundaries and carry the full
section path; oversized sections are sub-chunked by paragraph or by sentence.
"""

from chunkwise.config.chunking.models import ChunkingOptions
from chunkwise.schema.document import DocumentStructure
from chunkwise.services.chunking.base import BaseChunkingStrategy, ChunkBuilder, require_overlap_below
from chunkwise.services.chunking.cleaners import wrap_paragraph
from chunkwise.services.chunking.packing import pack_greedy
from chunkwise.services.chunking.splitters import sentences_or_whole
from chunkwise.services.chunking.strategies.fixed_size import fixed_size_pieces
from chunkwise.services.chunking.strategies.sections import Section, build_sections
from chunkwise.services.chunking.tokenizer import count_tokens


def _section_label(section: Section) -> str:
    if section.section_path:
        return " > ".join(section.section_path)
    if section.heading is not None:
        return section.heading.text
    return "Section"


def _section_units(section: Section, mode: str) -> tuple[list[str], list[int]]:
    """Markup and token size of each packable unit: whole blocks, or sentences in 'sentence' mode."""
    if mode != "sentence":
        blocks = section.all_blocks
        return [b.html for b in blocks], [count_tokens(b.text) for b in blocks]
    markups: list[str] = []
    sizes: list[int] = []
    if section.heading is not None:
        markups.append(section.heading.html)
        sizes.append(count_tokens(section.heading.text))
    for block in section.blocks:
        for sentence in sentences_or_whole(block.text):
            markups.append(wrap_paragraph(sentence))
            sizes.append(count_tokens(sentence))
    return markups, sizes


class HeadingAwareStrategy(BaseChunkingStrategy):
    """Groups content under headings, preserving document hierarchy."""

    @property
    def strategy_id(self) -> str:
        return "heading-aware"

    @property
    def name(self) -> str:
        return "Heading-Aware"

    @property
    def description(self) -> str:
        return (
            "Groups content under headings, preserving document hierarchy. "
            "Best for structured documents with clear sections."
        )

    @property
    def default_options(self) -> ChunkingOptions:
        return ChunkingOptions(
            max_tokens=1000,
            overlap_tokens=150,
            min_chunk_tokens=200,
            sub_chunking_strategy="paragraph",
        )

    def validate_options(self, options: ChunkingOptions) -> None:
        require_overlap_below(options, "max_tokens", "overlap_tokens")

    def _chunk(self, structure: DocumentStructure, options: ChunkingOptions, builder: ChunkBuilder) -> None:
        sections = build_sections(structure.blocks)
        if all(section.heading is None for section in sections):
            # No headings at all: same boundaries as fixed-size
            for piece in fixed_size_pieces(structure.blocks, options.max_tokens, options.overlap_tokens):
                builder.add(piece.content, "Section", first_block=piece.first_block)
            return
        for section in sections:
            self._chunk_section(section, options, builder)

    def _chunk_section(self, section: Section, options: ChunkingOptions, builder: ChunkBuilder) -> None:
        label = _section_label(section)
        first = section.first_block
        blocks = section.all_blocks
        total = sum(count_tokens(b.text) for b in blocks)
        if total <= options.max_tokens:
            builder.add(
                "\n".join(b.html for b in blocks),
                label,
                section_path=section.section_path,
                first_block=first,
            )
            return

        markups, sizes = _section_units(section, options.sub_chunking_strategy or "paragraph")
        groups = pack_greedy(
            sizes,
            options.max_tokens,
            options.overlap_tokens or 0,
            overlap_floor=1 if section.heading is not None else 0,
        )
        for group in groups:
            builder.add(
                "\n".join(markups[i] for i in group),
                label,
                section_path=section.section_path,
                first_block=first,
            )
