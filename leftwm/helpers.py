"""Generic list helpers: intersection, extraction, rotation, reordering and relative lookup."""

from __future__ import annotations

from collections.abc import Callable, Iterable, MutableSequence, Sequence
from typing import TypeVar

T = TypeVar("T")


def intersect(v1: Iterable[T], v2: Iterable[T]) -> bool:
    """Return True if any element of ``v1`` equals any element of ``v2``."""
    second = list(v2)
    return any(a == b for a in v1 for b in second)


def vec_extract(items: MutableSequence[T], test: Callable[[T], bool]) -> list[T]:
    """Remove every element matching ``test`` from ``items`` and return them.

    The order of both the removed and the remaining elements is preserved.
    """
    removed: list[T] = []
    kept: list[T] = []
    for item in items:
        (removed if test(item) else kept).append(item)
    items[:] = kept
    return removed


def cycle_vec(items: MutableSequence[T], shift: int) -> bool:
    """Rotate ``items`` in place: right for a positive ``shift``, left for a negative one.

    Returns False (leaving the list untouched) if ``|shift|`` exceeds the length.
    """
    change = abs(shift)
    if len(items) < change:
        return False
    if change and items:
        if shift < 0:
            items[:] = list(items[change:]) + list(items[:change])
        else:
            items[:] = list(items[-change:]) + list(items[:-change])
    return True


def reorder_vec(
    items: MutableSequence[T], test: Callable[[T], bool], shift: int
) -> bool:
    """Move the first element matching ``test`` by ``shift`` places, wrapping around.

    Returns False if the list has fewer than two elements or nothing matches.
    Raises IndexError if the shift cannot be resolved to a valid position.
    """
    length = len(items)
    if length < 2:
        return False
    index = next((i for i, item in enumerate(items) if test(item)), None)
    if index is None:
        return False

    item = items[index]
    new_index = index + shift
    del items[index]

    if new_index < 0:
        new_index += length
        items[:] = list(items[-1:]) + list(items[:-1])
    elif new_index >= length:
        new_index -= length
        items[:] = list(items[1:]) + list(items[:1])

    if not 0 <= new_index <= len(items):
        raise IndexError(f"shift {shift} moves element out of range")
    items.insert(new_index, item)
    return True


def relative_find(
    items: Sequence[T],
    reference_finder: Callable[[T], bool],
    shift: int,
    should_loop: bool,
) -> T | None:
    """Find the element ``shift`` places away from the first one matching ``reference_finder``.

    With ``should_loop`` the search wraps around the ends of the list; without it,
    a shift past either end yields None. None is also returned if no reference is found.
    """
    length = len(items)
    reference_index = next(
        (i for i, item in enumerate(items) if reference_finder(item)), None
    )
    if reference_index is None:
        return None

    if shift < 0:
        loops = -shift > reference_index
    else:
        loops = shift > length - (reference_index + 1)
    if loops and not should_loop:
        return None

    remainder = abs(shift) % length
    if shift < 0:
        remainder = -remainder
    shifted = reference_index + remainder
    if shifted < 0:
        shifted += length
    elif shifted > length - 1:
        shifted -= length

    if 0 <= shifted < length:
        return items[shifted]
    return None