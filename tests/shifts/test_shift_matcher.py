from datetime import datetime, time

import pytest

from src.shift_attendance.shift_attendance.shifts.matcher import (
    build_shift_end_time,
    detect_shift_for_time,
    find_shift_by_check_in_window,
    find_shift_for_punch_with_grace,
    is_within_check_in_window,
    is_within_check_out_window,
    match_shift_for_punch,
)
from src.shift_attendance.shift_attendance.shifts.model import Shift


def _shift(shift_id, start, end, grace_before=0, grace_after=0):
    return Shift(
        shift_id=shift_id,
        shift_name=f"S{shift_id}",
        employee_type="staff",
        start_time=start,
        end_time=end,
        grace_before_minutes=grace_before,
        grace_after_minutes=grace_after,
    )


@pytest.mark.parametrize(
    "start, end, sample_times",
    [
        (time(22, 0), time(6, 0), [time(22, 1), time(23, 59), time(0, 0), time(5, 59)]),
        (time(20, 30), time(4, 30), [time(20, 31), time(23, 59), time(4, 29)]),
        (time(18, 0), time(2, 0), [time(18, 0), time(1, 59), time(2, 0)]),
    ],
)
def test_overnight_shift_contains_both_sides_of_midnight(start, end, sample_times):
    day = _shift(1, time(8, 0), time(12, 0))
    night = _shift(2, start, end)
    for sample in sample_times:
        at = datetime(2025, 1, 1, sample.hour, sample.minute)
        match = detect_shift_for_time(at, [day, night])
        assert match.shift is night, sample


def test_containment_end_is_inclusive_and_first_shift_wins():
    morning = _shift(1, time(6, 0), time(14, 0))
    evening = _shift(2, time(14, 0), time(22, 0))

    assert detect_shift_for_time(datetime(2025, 1, 1, 14, 0), [morning, evening]).shift is morning
    assert detect_shift_for_time(datetime(2025, 1, 1, 14, 1), [morning, evening]).shift is evening


def test_no_containment_falls_back_to_first_shift():
    morning = _shift(1, time(6, 0), time(14, 0))
    evening = _shift(2, time(15, 0), time(22, 0))

    match = detect_shift_for_time(datetime(2025, 1, 1, 14, 30), [morning, evening])
    assert match.shift is morning
    assert match.shift_index == 0
    assert detect_shift_for_time(datetime(2025, 1, 1, 14, 30), []) is None


def test_overnight_end_moves_to_next_day():
    night = _shift(1, time(22, 0), time(6, 0))
    assert build_shift_end_time(datetime(2025, 1, 1, 23, 30), night) == datetime(2025, 1, 2, 6, 0)

    day = _shift(2, time(9, 0), time(17, 0))
    assert build_shift_end_time(datetime(2025, 1, 1, 8, 0), day) == datetime(2025, 1, 1, 17, 0)


def test_grace_window_match_prefers_grace_then_falls_back():
    early = _shift(1, time(9, 0), time(17, 0), grace_before=15)
    late = _shift(2, time(18, 0), time(23, 0), grace_before=60)

    assert find_shift_for_punch_with_grace(datetime(2025, 1, 1, 17, 10), [early, late]).shift is late
    assert find_shift_for_punch_with_grace(datetime(2025, 1, 1, 8, 50), [early, late]).shift is early
    # outside every grace window: containment fallback (first shift)
    assert match_shift_for_punch(datetime(2025, 1, 1, 5, 0), [early, late]) is early
    assert match_shift_for_punch(datetime(2025, 1, 1, 5, 0), []) is None


def test_check_in_window_defaults_to_thirty_minutes():
    no_grace = _shift(1, time(9, 0), time(17, 0))
    assert is_within_check_in_window(datetime(2025, 1, 1, 8, 30), no_grace)
    assert not is_within_check_in_window(datetime(2025, 1, 1, 8, 29), no_grace)
    assert is_within_check_in_window(datetime(2025, 1, 1, 17, 0), no_grace)
    assert not is_within_check_in_window(datetime(2025, 1, 1, 17, 1), no_grace)
    assert not is_within_check_in_window(datetime(2025, 1, 1, 9, 0), None)

    assert find_shift_by_check_in_window(datetime(2025, 1, 1, 7, 0), [no_grace]) is None


def test_check_out_window_is_last_thirty_minutes():
    day = _shift(1, time(9, 0), time(17, 0))
    assert is_within_check_out_window(datetime(2025, 1, 1, 16, 30), day)
    assert is_within_check_out_window(datetime(2025, 1, 1, 17, 0), day)
    assert not is_within_check_out_window(datetime(2025, 1, 1, 16, 29), day)

    night = _shift(2, time(22, 0), time(6, 0))
    check_in = datetime(2025, 1, 1, 22, 0)
    assert is_within_check_out_window(datetime(2025, 1, 2, 5, 45), night, anchor=check_in)
    assert not is_within_check_out_window(datetime(2025, 1, 2, 4, 0), night, anchor=check_in)
