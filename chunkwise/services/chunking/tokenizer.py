"""Token counting for chunking. tiktoken encoding is the sizing oracle for every strategy."""

import threading

import tiktoken

from chunkwise.config.logging import get_logger
from chunkwise.config.settings import get_settings

logger = get_logger(__name__)

_tiktoken_encoding: tiktoken.Encoding | None = None
_encoding_unavailable = False
_lock = threading.Lock()


def _get_tiktoken_encoding() -> tiktoken.Encoding | None:
    """Lazy-load the configured tiktoken encoding (cl100k_base by default) once per process."""
    global _tiktoken_encoding, _encoding_unavailable
    if _tiktoken_encoding is not None or _encoding_unavailable:
        return _tiktoken_encoding
    with _lock:
        if _tiktoken_encoding is None and not _encoding_unavailable:
            name = get_settings().tokenizer_encoding
            try:
                _tiktoken_encoding = tiktoken.get_encoding(name)
            except Exception as e:
                # Encoding files are fetched on first use; offline hosts cannot load them
                logger.warning(
                    "tiktoken encoding not available, token counts will use character estimate",
                    extra={"encoding": name, "error": str(e)},
                )
                _encoding_unavailable = True
    return _tiktoken_encoding


def count_tokens(text: str) -> int:
    """Return token count for text. Deterministic for the lifetime of the process."""
    if not text:
        return 0
    enc = _get_tiktoken_encoding()
    if enc is not None:
        return len(enc.encode(text, disallowed_special=()))
    # Fallback: rough approx 4 chars per token
    return max(1, len(text) // 4)
