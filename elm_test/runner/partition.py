"""Splits discovered tests across worker slots."""

from typing import Sequence, TypeVar

T = TypeVar("T")


def partition(items: Sequence[T], slots: int) -> list[tuple[T, ...]]:
    """Split items into contiguous, non-empty slices of near-equal size.

    Sizes differ by at most one and larger slices come first, so 10 items
    over 4 slots gives 3/3/2/2. Fewer items than slots gives one slice per
    item.

    Args:
        items: Items in their stable order.
        slots: Number of available slots (>= 1).

    Returns:
        At most ``slots`` slices whose concatenation equals ``items``.

    Raises:
        ValueError: If slots < 1.
    """
    if slots < 1:
        raise ValueError(f"slots must be at least 1, got {slots}")

    count = min(slots, len(items))
    if count == 0:
        return []

    size, extra = divmod(len(items), count)
    slices = []
    start = 0

    for index in range(count):
        end = start + size + (1 if index < extra else 0)
        slices.append(tuple(items[start:end]))
        start = end

    return slices
