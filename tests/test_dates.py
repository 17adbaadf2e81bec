from datetime import date, datetime

import pytest

from tournacal.dates import date_key, parse_local_datetime, today_key


def test_date_key_is_zero_padded() -> None:
    assert date_key(date(2026, 1, 5)) == "2026-01-05"


def test_date_key_ignores_time_of_day() -> None:
    assert date_key(datetime(2026, 1, 5, 0, 0)) == date_key(datetime(2026, 1, 5, 23, 59))


def test_date_key_keeps_local_day_for_aware_datetimes() -> None:
    just_after_midnight = datetime(2026, 1, 5, 0, 30).astimezone()
    assert date_key(just_after_midnight) == "2026-01-05"


def test_today_key_uses_given_day() -> None:
    assert today_key(date(2026, 12, 31)) == "2026-12-31"


def test_parse_local_datetime_formats() -> None:
    assert parse_local_datetime("2026/01/15 15:00") == datetime(2026, 1, 15, 15, 0)
    assert parse_local_datetime("2026/01/15") == datetime(2026, 1, 15)


@pytest.mark.parametrize("text", ["", "15/01/2026 15:00", "2026/13/01 10:00", "soon"])
def test_parse_local_datetime_rejects_garbage(text: str) -> None:
    with pytest.raises(ValueError):
        parse_local_datetime(text)
