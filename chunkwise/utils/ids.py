"""Id generation for chunks. Deterministic: same document, options and content give the same ids."""

import hashlib
import json

from chunkwise.config.chunking.models import ChunkingOptions


def compute_chunk_hash(chunk_text: str, strategy: str, options: ChunkingOptions) -> str:
    """Chunk hash = SHA-256(chunk_text + strategy + canonical options)."""
    options_canonical = json.dumps(options.canonical(), sort_keys=True, default=str)
    payload = f"{chunk_text}|{strategy}|{options_canonical}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def generate_chunk_id(source_file: str, chunk_index: int, chunk_hash: str) -> str:
    """Generate a deterministic chunk id from source file, index, and hash. Unique within one result."""
    payload = f"{source_file}:{chunk_index}:{chunk_hash}"
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()[:24]
    return f"chunk_{digest}"
