import pytest

from workflow_app.tracker.models import DayConfig, TimeRange
from workflow_app.tracker.ranges import active_hours, in_range


@pytest.mark.parametrize("start,end", [(0, 0), (8, 17), (23, 8), (13, 14)])
def test_disabled_range_never_matches(start, end):
    time_range = TimeRange(start, end, enabled=False)
    assert not any(in_range(hour, time_range) for hour in range(24))


def test_normal_range_is_half_open():
    time_range = TimeRange(9, 12)
    for hour in range(24):
        assert in_range(hour, time_range) == (9 <= hour < 12)


def test_wrapping_range_crosses_midnight():
    time_range = TimeRange(23, 8)
    inside = [hour for hour in range(24) if in_range(hour, time_range)]
    assert inside == [0, 1, 2, 3, 4, 5, 6, 7, 23]


def test_zero_width_range_is_empty():
    time_range = TimeRange(10, 10, enabled=True)
    assert not any(in_range(hour, time_range) for hour in range(24))


def test_in_range_rejects_out_of_day_hours():
    with pytest.raises(ValueError):
        in_range(24, TimeRange(0, 23))


def test_active_hours_default_config():
    assert active_hours(DayConfig()) == [8, 9, 10, 11, 12, 13, 14, 15, 16, 17, 19, 20, 21, 22]


def test_active_hours_union_of_overlapping_ranges():
    config = DayConfig(
        sleep1=TimeRange(22, 7),
        sleep2=TimeRange(12, 15, True),
        out=TimeRange(14, 16, True),
    )
    hours = active_hours(config)
    assert hours == [7, 8, 9, 10, 11, 16, 17, 18, 19, 20, 21]
    assert all(a < b for a, b in zip(hours, hours[1:]))


def test_active_hours_all_disabled_is_whole_day():
    off = TimeRange(0, 0, enabled=False)
    assert active_hours(DayConfig(off, off, off)) == list(range(24))
