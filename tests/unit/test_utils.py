from datetime import datetime, timedelta, timezone

from cloudlog_pump.utils.timefmt import ZERO_TIME, format_rfc3339


def test_format_rfc3339_uses_z_for_utc():
    value = datetime(2024, 3, 9, 7, 5, 1, 987654, tzinfo=timezone.utc)

    assert format_rfc3339(value) == "2024-03-09T07:05:01Z"


def test_format_rfc3339_treats_naive_as_utc():
    assert format_rfc3339(datetime(2024, 3, 9, 7, 5, 1)) == "2024-03-09T07:05:01Z"


def test_format_rfc3339_keeps_numeric_offsets():
    plus = timezone(timedelta(hours=5, minutes=30))
    minus = timezone(timedelta(hours=-8))

    assert format_rfc3339(datetime(2024, 1, 1, 12, tzinfo=plus)) == (
        "2024-01-01T12:00:00+05:30"
    )
    assert format_rfc3339(datetime(2024, 1, 1, 12, tzinfo=minus)) == (
        "2024-01-01T12:00:00-08:00"
    )


def test_format_rfc3339_renders_missing_value_as_zero_time():
    assert format_rfc3339(None) == "0001-01-01T00:00:00Z"
    assert format_rfc3339(ZERO_TIME) == "0001-01-01T00:00:00Z"
