"""Greedy packing of sized units into groups with a token-budgeted overlap tail."""

from collections.abc import Sequence


def overlap_tail(
    tokens: Sequence[int],
    group: Sequence[int],
    overlap_tokens: int,
    max_units: int | None = None,
    floor: int = 0,
) -> list[int]:
    """
    Trailing unit indexes of group whose combined tokens fit within overlap_tokens.
    Whole units only; empty when even the last unit does not fit. Indexes below
    floor never repeat.
    """
    if overlap_tokens <= 0 or not group:
        return []
    tail: list[int] = []
    used = 0
    for idx in reversed(group):
        if idx < floor or used + tokens[idx] > overlap_tokens:
            break
        tail.insert(0, idx)
        used += tokens[idx]
    if max_units is not None:
        keep = max(0, max_units - 1)
        tail = tail[len(tail) - keep:] if keep else []
    return tail


def pack_greedy(
    tokens: Sequence[int],
    max_tokens: int,
    overlap_tokens: int = 0,
    *,
    max_units: int | None = None,
    min_units: int = 1,
    overlap_floor: int = 0,
) -> list[list[int]]:
    """
    Pack units (given by their token counts) into ordered groups of indexes.

    A group is closed once adding the next unit would exceed max_tokens or
    max_units, provided it already holds min_units. The next group is seeded
    with an overlap tail of the closed one, trimmed so the seed plus the new
    unit stays within max_tokens; units before overlap_floor are never
    repeated. A single unit larger than max_tokens forms its own oversized group.
    """
    groups: list[list[int]] = []
    current: list[int] = []
    current_tokens = 0
    for idx, size in enumerate(tokens):
        exceeds_tokens = current_tokens + size > max_tokens
        exceeds_units = max_units is not None and len(current) >= max_units
        if current and (exceeds_tokens or exceeds_units) and len(current) >= min_units:
            groups.append(current)
            tail = overlap_tail(tokens, current, overlap_tokens, max_units, overlap_floor)
            while tail and sum(tokens[i] for i in tail) + size > max_tokens:
                tail.pop(0)
            current = [*tail, idx]
            current_tokens = sum(tokens[i] for i in current)
        else:
            current.append(idx)
            current_tokens += size
    if current:
        groups.append(current)
    return groups
