"""Scaling of fractional ms positions onto integer base-pair coordinates."""

from __future__ import annotations

import math
from typing import List, Sequence


def resolve_positions(fractional_positions: Sequence[float], segment_length: int) -> List[int]:
    """Return integer coordinates for *fractional_positions* on a segment.

    Each position becomes ``floor(p * segment_length)``. A coordinate equal to
    the one emitted just before it is moved to ``previous + 1``, so adjacent
    records never share a ``POS``. Only the immediate predecessor is compared
    and the input order is kept as supplied.
    """
    resolved: List[int] = []
    previous = 0
    for p in fractional_positions:
        candidate = math.floor(p * segment_length)
        if resolved and candidate == previous:
            candidate = previous + 1
        resolved.append(candidate)
        previous = candidate
    return resolved


__all__ = ["resolve_positions"]
