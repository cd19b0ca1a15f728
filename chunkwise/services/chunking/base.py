"""Base chunking strategy and contract, plus the chunk builder every strategy shares."""

import copy
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from chunkwise.config.chunking.models import ChunkingOptions
from chunkwise.config.chunking.static import OptionsInput, resolve_chunking_options
from chunkwise.schema.chunk import Chunk, ChunkMetadata
from chunkwise.schema.document import Block, DocumentStructure
from chunkwise.services.chunking.cleaners import html_to_text, leading_words_title, make_preview
from chunkwise.services.chunking.errors import InvalidOptionsError
from chunkwise.services.chunking.tokenizer import count_tokens
from chunkwise.utils.ids import compute_chunk_hash, generate_chunk_id


class ChunkBuilder:
    """
    Numbers and assembles chunks for one strategy run. token_count is always
    measured on the plain text of the final content. Each chunk gets its own
    copy of the options and global metadata.
    """

    def __init__(
        self,
        strategy_id: str,
        options: ChunkingOptions,
        structure: DocumentStructure,
        global_metadata: Mapping[str, Any] | None = None,
    ):
        self.strategy_id = strategy_id
        self.options = options
        self.structure = structure
        self.global_metadata = dict(global_metadata or {})
        self.chunks: list[Chunk] = []

    def add(
        self,
        content: str,
        label: str | None = None,
        *,
        section_path: Sequence[str] = (),
        first_block: Block | None = None,
        window_index: int | None = None,
    ) -> Chunk:
        """Append a chunk. Without a label the title uses the first words of the content."""
        text = html_to_text(content)
        index = len(self.chunks)
        chunk_hash = compute_chunk_hash(text, self.strategy_id, self.options)
        meta = first_block.meta if first_block is not None else None
        chunk = Chunk(
            id=generate_chunk_id(self.structure.source_file, index, chunk_hash),
            title=f"Chunk {index + 1}: {label if label is not None else leading_words_title(text)}",
            preview=make_preview(text),
            content=content,
            token_count=count_tokens(text),
            metadata=ChunkMetadata(
                strategy=self.strategy_id,
                strategy_options=self.options.model_copy(deep=True),
                section_path=list(section_path),
                source_file=self.structure.source_file,
                page=meta.page if meta else None,
                slide=meta.slide if meta else None,
                window_index=window_index,
                chunk_index=index,
                chunk_hash=chunk_hash,
                extra=copy.deepcopy(self.global_metadata),
            ),
        )
        self.chunks.append(chunk)
        return chunk


class BaseChunkingStrategy(ABC):
    """
    Abstract chunking strategy. A strategy maps a DocumentStructure plus options to
    an ordered chunk list, is stateless between calls, and either returns a complete
    list or raises.
    """

    @property
    @abstractmethod
    def strategy_id(self) -> str:
        """Strategy identifier, e.g. 'fixed-size', 'heading-aware'."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @property
    @abstractmethod
    def default_options(self) -> ChunkingOptions:
        """Options used for every field the caller does not override."""
        ...

    def validate_options(self, options: ChunkingOptions) -> None:
        """Reject merged options this strategy cannot honour. Raises InvalidOptionsError."""

    def chunk(
        self,
        structure: DocumentStructure,
        options: OptionsInput = None,
        global_metadata: Mapping[str, Any] | None = None,
    ) -> list[Chunk]:
        """Merge options over defaults, validate, and chunk the document."""
        merged = resolve_chunking_options(self, options)
        builder = ChunkBuilder(self.strategy_id, merged, structure, global_metadata)
        if structure.blocks:
            self._chunk(structure, merged, builder)
        return list(builder.chunks)

    @abstractmethod
    def _chunk(self, structure: DocumentStructure, options: ChunkingOptions, builder: ChunkBuilder) -> None:
        """Emit chunks for a non-empty document into builder, in document order."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(strategy_id={self.strategy_id!r})"


def require_overlap_below(options: ChunkingOptions, size_field: str, overlap_field: str) -> None:
    """Shared check: an overlap (or other sub-budget) must stay strictly below the size it belongs to."""
    size = getattr(options, size_field)
    overlap = getattr(options, overlap_field)
    if size is not None and overlap is not None and overlap >= size:
        raise InvalidOptionsError(f"{overlap_field} ({overlap}) must be smaller than {size_field} ({size})")
