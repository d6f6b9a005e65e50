"""
Slot generation and the overlap predicate it shares with the booking guard.

Everything here is pure: callers hand in blocks and bookings (model rows or
anything exposing ``id``, ``start_time``, ``end_time`` and, for blocks,
``branch_id``) and get plain dicts back. Availability is never stored, it is
recomputed from these two collections on every read.
"""
from typing import Dict, Iterable, List, Optional

from .timeutils import minutes_of_day, minutes_to_str


def sessions_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open overlap of [start_a, end_a) and [start_b, end_b), in minutes.

    Touching endpoints do not overlap. Applied across all branches: one coach
    runs one session at a time wherever it is held.
    """
    return start_a < end_b and start_b < end_a


def has_collision(start: int, end: int, bookings: Iterable, exclude_id: Optional[str] = None) -> bool:
    for booking in bookings:
        if exclude_id and booking.id == exclude_id:
            continue
        if sessions_overlap(start, end, minutes_of_day(booking.start_time), minutes_of_day(booking.end_time)):
            return True
    return False


def generate_slots(
    blocks: Iterable,
    bookings: Iterable,
    branch_names: Dict[str, str],
    duration: int,
    step: int,
) -> List[dict]:
    """
    Walk every block in ``step`` increments and keep each ``duration``-long
    candidate that fits in the block and clears every booking of the day.

    Output follows block iteration order; it is not globally time-sorted.
    """
    bookings = list(bookings)
    slots = []
    for block in blocks:
        block_start = minutes_of_day(block.start_time)
        block_end = minutes_of_day(block.end_time)
        cursor = block_start
        while cursor + duration <= block_end:
            end = cursor + duration
            if not has_collision(cursor, end, bookings):
                slots.append({
                    'startTime': minutes_to_str(cursor),
                    'endTime': minutes_to_str(end),
                    'branchId': block.branch_id,
                    'branchName': branch_names.get(block.branch_id, ''),
                    'blockId': block.id,
                })
            cursor += step
    return slots
