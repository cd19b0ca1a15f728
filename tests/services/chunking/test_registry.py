from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from chunkwise.config.chunking.models import ChunkingOptions
from chunkwise.schema.document import DocumentStructure
from chunkwise.services.chunking import strategies as builtin
from chunkwise.services.chunking.base import BaseChunkingStrategy, ChunkBuilder
from chunkwise.services.chunking.errors import StrategyNotFoundError
from chunkwise.services.chunking.registry import StrategyRegistry
from chunkwise.services.chunking.strategies import (
    FixedSizeStrategy,
    get_default_registry,
    init,
    strategies,
)


class _EchoStrategy(BaseChunkingStrategy):
    """One chunk per block, for registry tests."""

    def __init__(self, strategy_id: str = "echo"):
        self._id = strategy_id

    @property
    def strategy_id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return "Echo"

    @property
    def description(self) -> str:
        return "One chunk per block."

    @property
    def default_options(self) -> ChunkingOptions:
        return ChunkingOptions()

    def _chunk(self, structure: DocumentStructure, options: ChunkingOptions, builder: ChunkBuilder) -> None:
        for block in structure.blocks:
            builder.add(block.html, first_block=block)


def test_init_registers_builtin_strategies_in_order() -> None:
    registry = init()

    assert registry.ids() == ["fixed-size", "heading-aware", "paragraph-aware", "sliding-window"]
    assert [s.strategy_id for s in registry.list()] == registry.ids()
    assert len(registry) == 4
    assert "heading-aware" in registry
    assert registry.has("sliding-window")


def test_init_populates_an_injected_registry() -> None:
    registry = StrategyRegistry()
    registry.register(_EchoStrategy())

    returned = init(registry)

    assert returned is registry
    assert registry.get("echo") is not None
    assert registry.get("fixed-size") is not None


def test_get_returns_none_and_require_raises_for_unknown_ids() -> None:
    registry = init()

    assert registry.get("semantic") is None
    with pytest.raises(StrategyNotFoundError) as exc_info:
        registry.require("semantic")
    assert exc_info.value.strategy_id == "semantic"
    assert isinstance(exc_info.value, ValueError)


def test_later_registration_under_same_id_wins() -> None:
    registry = StrategyRegistry()
    first = _EchoStrategy("dup")
    second = _EchoStrategy("dup")

    registry.register(first)
    registry.register(second)

    assert registry.get("dup") is second
    assert len(registry) == 1


def test_builtin_strategy_can_be_replaced() -> None:
    registry = init()
    replacement = _EchoStrategy("fixed-size")

    registry.register(replacement)

    assert registry.get("fixed-size") is replacement


def test_strategies_returns_fresh_instances() -> None:
    first = strategies()
    second = strategies()

    assert [type(s) for s in first] == [type(s) for s in second]
    assert all(a is not b for a, b in zip(first, second))
    assert isinstance(first[0], FixedSizeStrategy)


def test_default_registry_is_created_once() -> None:
    assert get_default_registry() is get_default_registry()
    assert get_default_registry().has("fixed-size")


def test_concurrent_first_calls_build_one_default_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    built: list[StrategyRegistry] = []
    start = threading.Barrier(8)

    def slow_init(registry: StrategyRegistry | None = None) -> StrategyRegistry:
        time.sleep(0.05)
        built.append(StrategyRegistry())
        return built[-1]

    def first_call() -> StrategyRegistry:
        start.wait()
        return get_default_registry()

    monkeypatch.setattr(builtin, "_default_registry", None)
    monkeypatch.setattr(builtin, "init", slow_init)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: first_call(), range(8)))

    assert len(built) == 1
    assert all(r is built[0] for r in results)
