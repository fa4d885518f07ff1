"""
Reordering of line items after a drag-and-drop move.

Only positions change. Quantities, prices and kinds are untouched, so
reordering never changes a quote's totals.
"""

from typing import List, Sequence, TypeVar

T = TypeVar("T")


def move_item(sequence: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """
    Return a new list with the element at from_index moved to to_index.

    Elements in between shift by one. A from_index outside the list leaves
    the order as it is; to_index is clamped into the list.
    """
    items = list(sequence)
    if not 0 <= from_index < len(items):
        return items
    to_index = max(0, min(to_index, len(items) - 1))
    if from_index == to_index:
        return items

    item = items.pop(from_index)
    items.insert(to_index, item)
    return items


def move_item_by_id(lines: Sequence[T], active_id, over_id) -> List[T]:
    """Drop handler: move the dragged line onto the position of the line it was dropped over."""
    ids = [line.id for line in lines]
    if active_id == over_id or active_id not in ids or over_id not in ids:
        return list(lines)
    return move_item(lines, ids.index(active_id), ids.index(over_id))
