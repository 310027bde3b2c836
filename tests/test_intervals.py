from datetime import datetime, time

from apps.bookings import intervals
from apps.bookings.domain import Interval


def dt(hour, minute=0):
    return datetime(2025, 3, 11, hour, minute)


def iv(start, end):
    return Interval(dt(*start), dt(*end))


class TestOverlaps:
    def test_disjoint_intervals_do_not_overlap(self):
        assert not intervals.overlaps(iv((9,), (10,)), iv((11,), (12,)))

    def test_touching_intervals_do_not_overlap_without_buffer(self):
        assert not intervals.overlaps(iv((9,), (10,)), iv((10,), (11,)))

    def test_touching_intervals_overlap_with_buffer(self):
        assert intervals.overlaps(iv((9,), (10,)), iv((10,), (11,)), buffer_minutes=15)

    def test_gap_exactly_equal_to_buffer_is_allowed(self):
        assert not intervals.overlaps(iv((9,), (10,)), iv((10, 15), (11, 15)), buffer_minutes=15)

    def test_gap_shorter_than_buffer_overlaps(self):
        assert intervals.overlaps(iv((9,), (10,)), iv((10, 14), (11, 14)), buffer_minutes=15)

    def test_is_symmetric(self):
        a, b = iv((9,), (10,)), iv((10, 5), (11,))
        assert intervals.overlaps(a, b, 15) == intervals.overlaps(b, a, 15)

    def test_containment_overlaps(self):
        assert intervals.overlaps(iv((9,), (17,)), iv((12,), (13,)))


class TestGridAlignment:
    def test_rounds_down_to_grid(self):
        assert intervals.align_to_grid(dt(10, 40), 30, dt(9)) == dt(10, 30)

    def test_grid_origin_is_open_time(self):
        assert intervals.align_to_grid(dt(10, 40), 60, dt(9, 15)) == dt(10, 15)

    def test_aligned_value_is_unchanged(self):
        assert intervals.align_to_grid(dt(11), 60, dt(9)) == dt(11)
        assert intervals.is_aligned(dt(11), 60, dt(9))

    def test_align_up(self):
        assert intervals.align_up(dt(11, 15), 60, dt(9)) == dt(12)
        assert intervals.align_up(dt(12), 60, dt(9)) == dt(12)

    def test_not_aligned(self):
        assert not intervals.is_aligned(dt(10, 30), 60, dt(9))


class TestSubtract:
    def test_no_blocks_returns_whole_interval(self):
        assert intervals.subtract_intervals(iv((9,), (17,)), []) == [iv((9,), (17,))]

    def test_block_in_the_middle_splits(self):
        free = intervals.subtract_intervals(iv((9,), (17,)), [iv((9, 45), (11, 15))])
        assert free == [iv((9,), (9, 45)), iv((11, 15), (17,))]

    def test_overlapping_blocks_are_merged(self):
        free = intervals.subtract_intervals(
            iv((9,), (17,)), [iv((12,), (14,)), iv((10,), (13,))],
        )
        assert free == [iv((9,), (10,)), iv((14,), (17,))]

    def test_blocks_outside_interval_are_ignored(self):
        free = intervals.subtract_intervals(iv((9,), (12,)), [iv((7,), (8,)), iv((13,), (14,))])
        assert free == [iv((9,), (12,))]

    def test_fully_covered(self):
        assert intervals.subtract_intervals(iv((9,), (12,)), [iv((8,), (13,))]) == []


def test_merge_joins_touching_intervals():
    merged = intervals.merge_intervals([iv((10,), (11,)), iv((9,), (10,)), iv((12,), (13,))])
    assert merged == [iv((9,), (11,)), iv((12,), (13,))]


def test_expand_widens_both_sides():
    assert intervals.expand(iv((10,), (11,)), 15) == iv((9, 45), (11, 15))


def test_format_time():
    assert intervals.format_time(time(9, 0)) == '9:00 AM'
    assert intervals.format_time(time(0, 30)) == '12:30 AM'
    assert intervals.format_time(time(12, 0)) == '12:00 PM'
    assert intervals.format_time(time(16, 45)) == '4:45 PM'
