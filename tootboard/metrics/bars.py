"""Proportional segment lengths for the stacked daily bars."""

from __future__ import annotations

from typing import Sequence


def allocate(values: Sequence[int], scale: int, width: int) -> list[int]:
    """Split ``width`` cells between ``values`` in proportion to ``scale``.

    Each segment starts at ``floor(value * width / scale)``. A nonzero value
    whose segment rounded to zero gets one cell. The lengths are then nudged
    one cell at a time on the currently largest segment (earliest wins ties)
    until they sum to exactly ``width``. With very small widths the trimming
    can take a nonzero value back to zero; the exact sum wins.

    Args:
        values: Nonnegative counts in category order (follows, likes, boosts).
        scale: The largest daily total in the visible series, > 0.
        width: Number of cells available, >= 0.

    Returns:
        One length per value, summing to ``width``.
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    if width < 0:
        raise ValueError(f"width must be nonnegative, got {width}")
    if any(value < 0 for value in values):
        raise ValueError("values must be nonnegative")

    lengths = [(value * width) // scale for value in values]

    if width > 0:
        for i, value in enumerate(values):
            if value > 0 and lengths[i] == 0:
                lengths[i] = 1

    total = sum(lengths)
    while total > width:
        lengths[_largest(lengths)] -= 1
        total -= 1
    while total < width:
        lengths[_largest(lengths)] += 1
        total += 1
    return lengths


def _largest(lengths: Sequence[int]) -> int:
    best = 0
    for i, length in enumerate(lengths):
        if length > lengths[best]:
            best = i
    return best
