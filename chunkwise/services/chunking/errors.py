"""Chunking errors. Caller and configuration mistakes only; sizing problems never raise."""


class ChunkingError(Exception):
    """Base class for failures surfaced by the chunking engine."""


class StrategyNotFoundError(ChunkingError, ValueError):
    """Raised when a strategy id is absent from the registry."""

    def __init__(self, strategy_id: str):
        super().__init__(f"Unknown chunking strategy: {strategy_id!r}")
        self.strategy_id = strategy_id


class InvalidOptionsError(ChunkingError, ValueError):
    """Raised when merged options are rejected by field constraints or a strategy's validation."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause
