"""
Chunker: takes a document structure + strategy id + options and returns chunks.
Deterministic per input and options. Orchestration: normalize → resolve strategy → chunk.
"""

import time
from collections.abc import Mapping, Sequence
from typing import Any

from chunkwise.config.chunking.static import OptionsInput
from chunkwise.config.logging import get_logger
from chunkwise.config.settings import get_settings
from chunkwise.schema.chunk import Chunk
from chunkwise.schema.document import DocumentStructure, SourceFormat
from chunkwise.services.chunking.registry import StrategyRegistry
from chunkwise.services.chunking.strategies import get_default_registry
from chunkwise.services.document.normalizer import normalize

logger = get_logger(__name__)


def chunk_document(
    structure: DocumentStructure,
    strategy_id: str,
    options: OptionsInput = None,
    global_metadata: Mapping[str, Any] | None = None,
    registry: StrategyRegistry | None = None,
) -> list[Chunk]:
    """
    Chunk a normalized document with the named strategy. Options are merged over the
    strategy's defaults. Raises StrategyNotFoundError or InvalidOptionsError.
    """
    registry = registry if registry is not None else get_default_registry()
    strategy = registry.require(strategy_id)
    started = time.perf_counter()
    chunks = strategy.chunk(structure, options, global_metadata)
    logger.info(
        "Chunked document",
        extra={
            "source_file": structure.source_file,
            "strategy": strategy_id,
            "blocks": len(structure.blocks),
            "chunks": len(chunks),
            "tokens": sum(c.token_count for c in chunks),
            "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return chunks


def chunk_markup(
    markup: str,
    source_format: SourceFormat,
    source_file: str,
    strategy_id: str | None = None,
    options: OptionsInput = None,
    global_metadata: Mapping[str, Any] | None = None,
    registry: StrategyRegistry | None = None,
) -> list[Chunk]:
    """Normalize reader markup and chunk it. Strategy defaults to the configured default_strategy."""
    structure = normalize(markup, source_format, source_file)
    return chunk_document(
        structure,
        strategy_id or get_settings().default_strategy,
        options=options,
        global_metadata=global_metadata,
        registry=registry,
    )


def rechunk(
    chunks: Sequence[Chunk],
    source_format: SourceFormat,
    source_file: str,
    strategy_id: str | None = None,
    options: OptionsInput = None,
    global_metadata: Mapping[str, Any] | None = None,
    registry: StrategyRegistry | None = None,
) -> list[Chunk]:
    """
    Join existing chunk contents and chunk them again from scratch. The old list is
    not modified; overlap text duplicated by the earlier run is kept as content.
    """
    markup = "\n".join(c.content for c in chunks)
    return chunk_markup(
        markup,
        source_format,
        source_file,
        strategy_id=strategy_id,
        options=options,
        global_metadata=global_metadata,
        registry=registry,
    )
