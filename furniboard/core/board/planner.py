"""Pure position planning for status-partitioned boards.

Every function here takes snapshots of column membership and returns the
position changes needed to keep each column densely ordered (positions are
exactly ``0..n-1``). Nothing here touches the database; the store applies the
returned updates inside the caller's transaction.

Target positions are assigned by rank rather than by adding or subtracting
from the stored value, so a column that was left with a gap by some earlier
out-of-band write is healed by the next operation touching it.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence

from furniboard.core.board.schemas import ColumnEntry, MovePlan, PositionUpdate


def sort_column(column: Iterable[ColumnEntry]) -> list[ColumnEntry]:
    return sorted(column, key=lambda e: e.position)


def is_dense(positions: Iterable[int]) -> bool:
    ordered = sorted(positions)
    return ordered == list(range(len(ordered)))


def next_position(column: Sequence[ColumnEntry]) -> int:
    """Slot at the end of a column: ``max + 1``, or 0 for an empty column."""
    if not column:
        return 0
    return max(e.position for e in column) + 1


def clamp_position(requested: int, upper: int) -> int:
    return max(0, min(requested, upper))


def _reassign(ordered: Sequence[ColumnEntry], status: str) -> list[PositionUpdate]:
    updates = []
    for index, entry in enumerate(ordered):
        if entry.position != index:
            updates.append(
                PositionUpdate(
                    item_id=entry.item_id,
                    status=status,
                    old_position=entry.position,
                    new_position=index,
                )
            )
    return updates


def plan_move(
    item_id: uuid.UUID,
    old_status: str,
    new_status: str,
    requested_position: int,
    source_column: Sequence[ColumnEntry],
    dest_column: Sequence[ColumnEntry] = (),
) -> MovePlan:
    """Plan moving ``item_id`` to ``requested_position`` in ``new_status``.

    ``source_column`` is the item's current column and must contain the item.
    ``dest_column`` is only consulted for cross-column moves. Positions past
    the end of the target column are clamped to the last valid slot.
    """
    source = sort_column(source_column)
    moved = next((e for e in source if e.item_id == item_id), None)
    if moved is None:
        raise ValueError(f"item {item_id} is not in its source column")

    others = [e for e in source if e.item_id != item_id]

    if new_status == old_status:
        # Same column: re-rank with the item spliced into its new slot
        new_position = clamp_position(requested_position, len(others))
        ordered = others[:new_position] + [moved] + others[new_position:]
        updates = [u for u in _reassign(ordered, old_status) if u.item_id != item_id]
    else:
        dest = [e for e in sort_column(dest_column) if e.item_id != item_id]
        new_position = clamp_position(requested_position, len(dest))
        # Open a slot in the destination, then close the gap in the source
        opened = dest[:new_position] + [moved] + dest[new_position:]
        updates = [u for u in _reassign(opened, new_status) if u.item_id != item_id]
        updates += _reassign(others, old_status)

    return MovePlan(
        item_id=item_id,
        old_status=old_status,
        old_position=moved.position,
        new_status=new_status,
        new_position=new_position,
        updates=updates,
    )


def plan_append(
    item_id: uuid.UUID,
    old_status: str,
    new_status: str,
    source_column: Sequence[ColumnEntry],
    dest_column: Sequence[ColumnEntry] = (),
) -> MovePlan:
    """Plan a status change that lands the item at the end of its new column."""
    if new_status == old_status:
        return plan_move(item_id, old_status, new_status, _current(item_id, source_column), source_column)
    target = next_position([e for e in dest_column if e.item_id != item_id])
    return plan_move(item_id, old_status, new_status, target, source_column, dest_column)


def plan_close_gap(
    removed_id: uuid.UUID, status: str, column: Sequence[ColumnEntry]
) -> list[PositionUpdate]:
    """Updates restoring density after ``removed_id`` leaves ``column``."""
    remaining = [e for e in sort_column(column) if e.item_id != removed_id]
    return _reassign(remaining, status)


def _current(item_id: uuid.UUID, column: Sequence[ColumnEntry]) -> int:
    for entry in column:
        if entry.item_id == item_id:
            return entry.position
    raise ValueError(f"item {item_id} is not in its source column")
