from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from thinklink.services.civil_time import civil_now, civil_to_utc, to_civil_naive


def test_civil_now_is_naive_jerusalem_wall_clock():
    expected = datetime.now(ZoneInfo("Asia/Jerusalem")).replace(tzinfo=None)
    now = civil_now()
    assert now.tzinfo is None
    assert abs(now - expected) < timedelta(seconds=5)


def test_aware_datetime_converted_to_civil_summer_and_winter():
    # 여름(IDT, +3) / 겨울(IST, +2)
    assert to_civil_naive(datetime(2030, 7, 1, 12, 0, tzinfo=timezone.utc)) == datetime(2030, 7, 1, 15, 0)
    assert to_civil_naive(datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)) == datetime(2030, 1, 1, 14, 0)


def test_naive_datetime_left_unchanged():
    value = datetime(2030, 3, 10, 9, 30)
    assert to_civil_naive(value) is value


def test_civil_to_utc_round_trip_across_offsets():
    assert civil_to_utc(datetime(2030, 7, 1, 19, 0)) == datetime(2030, 7, 1, 16, 0, tzinfo=timezone.utc)
    assert civil_to_utc(datetime(2030, 12, 1, 19, 0)) == datetime(2030, 12, 1, 17, 0, tzinfo=timezone.utc)
