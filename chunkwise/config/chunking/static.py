"""Chunking options resolution: strategy defaults + caller overrides. Read-only; no business logic."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from chunkwise.config.chunking.models import ChunkingOptions
from chunkwise.services.chunking.errors import InvalidOptionsError

OptionsInput = ChunkingOptions | Mapping[str, Any] | None


def coerce_options(options: OptionsInput) -> ChunkingOptions:
    """Validate a dict (snake_case or camelCase keys) into ChunkingOptions. None gives empty options."""
    if options is None:
        return ChunkingOptions()
    if isinstance(options, ChunkingOptions):
        return options
    try:
        return ChunkingOptions.model_validate(dict(options))
    except ValidationError as e:
        raise InvalidOptionsError(f"Invalid chunking options: {e.error_count()} error(s)", cause=e) from e


def merge_options(defaults: ChunkingOptions, overrides: OptionsInput = None) -> ChunkingOptions:
    """
    Shallow-merge overrides on top of defaults. Only fields the caller explicitly set
    (and that are not None) replace defaults; custom_params are merged key by key.
    """
    over = coerce_options(overrides)
    update: dict[str, Any] = {}
    for name in over.model_fields_set:
        if name == "custom_params":
            continue
        value = getattr(over, name)
        if value is not None:
            update[name] = value
    if over.custom_params:
        update["custom_params"] = {**defaults.custom_params, **over.custom_params}
    return defaults.model_copy(update=update)


def resolve_chunking_options(strategy: Any, overrides: OptionsInput = None) -> ChunkingOptions:
    """
    Resolve options for a strategy: its published defaults merged with overrides,
    then checked by the strategy's own validation. Raises InvalidOptionsError.
    """
    merged = merge_options(strategy.default_options, overrides)
    strategy.validate_options(merged)
    return merged
