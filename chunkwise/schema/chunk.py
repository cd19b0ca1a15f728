"""Chunk output model returned by every strategy."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from chunkwise.config.chunking.models import ChunkingOptions


class ChunkMetadata(BaseModel):
    """Lineage and sizing context attached to each chunk."""

    model_config = ConfigDict(frozen=True)

    strategy: str = Field(..., description="Id of the strategy that produced the chunk")
    strategy_options: ChunkingOptions = Field(..., description="Merged options actually used")
    section_path: list[str] = Field(default_factory=list, description="Ancestor heading texts")
    source_file: str
    page: int | None = None
    slide: int | None = None
    window_index: int | None = Field(default=None, description="Sliding window start unit offset")
    chunk_index: int = Field(..., ge=0)
    chunk_hash: str
    extra: dict[str, Any] = Field(default_factory=dict, description="Caller-supplied global metadata")


class Chunk(BaseModel):
    """
    One bounded span of content. Immutable engine output; callers that edit
    chunks work on model_copy(update=..., deep=True) copies so nested metadata
    is not shared with the original.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    preview: str
    content: str = Field(..., description="Markup")
    token_count: int = Field(..., ge=0)
    metadata: ChunkMetadata
