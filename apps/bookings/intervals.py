"""
Interval arithmetic for the booking engine — pure functions, no state.

Intervals are closed-open [start, end). A buffer is applied symmetrically, so
two bookings must be separated by at least `buffer` minutes on either side.
"""
from datetime import datetime, time as time_type, timedelta

from .domain import Interval


def add_minutes(moment: datetime, minutes: int) -> datetime:
    return moment + timedelta(minutes=minutes)


def overlaps(a: Interval, b: Interval, buffer_minutes: int = 0) -> bool:
    """True unless a gap of at least `buffer_minutes` separates `a` and `b`."""
    gap = timedelta(minutes=buffer_minutes)
    return not (a.end + gap <= b.start or b.end + gap <= a.start)


def expand(interval: Interval, buffer_minutes: int) -> Interval:
    """Widen an interval by the buffer on both sides."""
    gap = timedelta(minutes=buffer_minutes)
    return Interval(interval.start - gap, interval.end + gap)


def align_to_grid(moment: datetime, step_minutes: int, origin: datetime) -> datetime:
    """Round `moment` down to the nearest grid point `origin + k * step`."""
    step = timedelta(minutes=step_minutes)
    return origin + ((moment - origin) // step) * step


def align_up(moment: datetime, step_minutes: int, origin: datetime) -> datetime:
    """Round `moment` up to the nearest grid point (identity when already aligned)."""
    floor = align_to_grid(moment, step_minutes, origin)
    if floor == moment:
        return moment
    return floor + timedelta(minutes=step_minutes)


def is_aligned(moment: datetime, step_minutes: int, origin: datetime) -> bool:
    return align_to_grid(moment, step_minutes, origin) == moment


def merge_intervals(intervals: list) -> list:
    """Union of overlapping or touching intervals, sorted by start."""
    if not intervals:
        return []

    ordered = sorted(intervals, key=lambda i: i.start)
    merged = [ordered[0]]
    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = Interval(last.start, current.end)
        else:
            merged.append(current)
    return merged


def subtract_intervals(interval: Interval, blocks: list) -> list:
    """
    Remove every block from `interval`.

    Returns the free sub-intervals left over, in ascending order. Empty when
    the blocks cover the whole interval.
    """
    free = []
    cursor = interval.start
    for block in merge_intervals(blocks):
        if block.end <= cursor:
            continue
        if block.start >= interval.end:
            break
        if block.start > cursor:
            free.append(Interval(cursor, block.start))
        cursor = max(cursor, block.end)
    if cursor < interval.end:
        free.append(Interval(cursor, interval.end))
    return free


def format_time(t: time_type) -> str:
    """
    Format time as '10:00 AM' without a leading zero on the hour.
    strftime('%-I') is not portable, so the hour is computed by hand.
    """
    hour = t.hour % 12 or 12
    ampm = 'AM' if t.hour < 12 else 'PM'
    return f"{hour}:{t.strftime('%M')} {ampm}"
