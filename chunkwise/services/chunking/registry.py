"""Strategy registry: lookup from strategy id to implementation. Injected where it is used."""

from chunkwise.config.logging import get_logger
from chunkwise.services.chunking.base import BaseChunkingStrategy
from chunkwise.services.chunking.errors import StrategyNotFoundError

logger = get_logger(__name__)


class StrategyRegistry:
    """
    Holds strategies by id. Populated once at startup and read-only afterwards.
    Registering an id that already exists replaces the earlier strategy.
    """

    def __init__(self) -> None:
        self._strategies: dict[str, BaseChunkingStrategy] = {}

    def register(self, strategy: BaseChunkingStrategy) -> None:
        existing = self._strategies.get(strategy.strategy_id)
        if existing is not None and existing is not strategy:
            logger.warning(
                "Replacing registered chunking strategy",
                extra={"strategy_id": strategy.strategy_id, "previous": type(existing).__name__},
            )
        self._strategies[strategy.strategy_id] = strategy

    def get(self, strategy_id: str) -> BaseChunkingStrategy | None:
        """Return the strategy for the given id, or None."""
        return self._strategies.get(strategy_id)

    def require(self, strategy_id: str) -> BaseChunkingStrategy:
        """Return the strategy for the given id. Raises StrategyNotFoundError."""
        strategy = self._strategies.get(strategy_id)
        if strategy is None:
            raise StrategyNotFoundError(strategy_id)
        return strategy

    def has(self, strategy_id: str) -> bool:
        return strategy_id in self._strategies

    def ids(self) -> list[str]:
        return list(self._strategies)

    def __contains__(self, strategy_id: object) -> bool:
        return strategy_id in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    def list(self) -> list[BaseChunkingStrategy]:
        """All registered strategies in registration order."""
        return list(self._strategies.values())
