"""Built-in chunking strategies and registry initialisation."""

import threading

from chunkwise.services.chunking.base import BaseChunkingStrategy
from chunkwise.services.chunking.registry import StrategyRegistry
from chunkwise.services.chunking.strategies.fixed_size import FixedSizeStrategy
from chunkwise.services.chunking.strategies.heading_aware import HeadingAwareStrategy
from chunkwise.services.chunking.strategies.paragraph_aware import ParagraphAwareStrategy
from chunkwise.services.chunking.strategies.sliding_window import SlidingWindowStrategy

BUILTIN_STRATEGIES: tuple[type[BaseChunkingStrategy], ...] = (
    FixedSizeStrategy,
    HeadingAwareStrategy,
    ParagraphAwareStrategy,
    SlidingWindowStrategy,
)

_default_registry: StrategyRegistry | None = None
_lock = threading.Lock()


def strategies() -> list[BaseChunkingStrategy]:
    """Fresh instances of every built-in strategy."""
    return [cls() for cls in BUILTIN_STRATEGIES]


def init(registry: StrategyRegistry | None = None) -> StrategyRegistry:
    """Register the built-in strategies into registry (a new one if omitted) and return it."""
    registry = registry if registry is not None else StrategyRegistry()
    for strategy in strategies():
        registry.register(strategy)
    return registry


def get_default_registry() -> StrategyRegistry:
    """Process-wide registry holding the built-ins, created on first use."""
    global _default_registry
    if _default_registry is not None:
        return _default_registry
    with _lock:
        if _default_registry is None:
            _default_registry = init()
    return _default_registry


__all__ = [
    "BUILTIN_STRATEGIES",
    "FixedSizeStrategy",
    "HeadingAwareStrategy",
    "ParagraphAwareStrategy",
    "SlidingWindowStrategy",
    "get_default_registry",
    "init",
    "strategies",
]
