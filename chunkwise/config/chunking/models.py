"""Chunking configuration models. Read-only; no business logic."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

SubChunkingStrategy = Literal["paragraph", "sentence"]


class ChunkingOptions(BaseModel):
    """
    Flat chunking options shared by every strategy. Unset fields are None; each
    strategy publishes defaults and callers override only what they set.
    Keys no field recognises land in custom_params.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    max_tokens: int | None = Field(default=None, ge=1, le=10000, description="Token budget per chunk")
    overlap_tokens: int | None = Field(default=None, ge=0, le=1000, description="Overlap between chunks")
    min_chunk_tokens: int | None = Field(default=None, ge=0, description="Smallest useful chunk, recorded for downstream consumers")
    sub_chunking_strategy: SubChunkingStrategy | None = Field(default=None)
    min_paragraphs_per_chunk: int | None = Field(default=None, ge=1)
    max_paragraphs_per_chunk: int | None = Field(default=None, ge=1)
    window_size: int | None = Field(default=None, ge=1, le=10000, description="Window size in units")
    overlap_size: int | None = Field(default=None, ge=0, le=5000, description="Window overlap in units")
    preserve_word_boundaries: bool | None = Field(default=None)
    preserve_sentence_boundaries: bool | None = Field(default=None)
    custom_params: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_custom_params(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known: set[str] = set()
        for name, field in cls.model_fields.items():
            known.add(name)
            if field.alias:
                known.add(field.alias)
        custom = dict(data.get("custom_params") or data.get("customParams") or {})
        out: dict[str, Any] = {}
        for key, value in data.items():
            if key in ("custom_params", "customParams"):
                continue
            if key in known:
                out[key] = value
            else:
                custom[key] = value
        out["custom_params"] = custom
        return out

    def canonical(self) -> dict[str, Any]:
        """JSON-safe dict of the fields that are set, for hashing and logs."""
        return self.model_dump(mode="json", exclude_none=True)
