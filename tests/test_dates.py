from datetime import date, datetime, timedelta, timezone

import pytest

from app.dates import canonical_day


def test_plain_date_and_string():
    assert canonical_day(date(2024, 5, 1)) == date(2024, 5, 1)
    assert canonical_day("2024-05-01") == date(2024, 5, 1)


def test_aware_values_use_utc_day():
    # 23:30 on the 1st in UTC-05:00 is already the 2nd in UTC
    assert canonical_day("2024-05-01T23:30:00-05:00") == date(2024, 5, 2)
    assert canonical_day("2024-05-01T23:30:00Z") == date(2024, 5, 1)
    late = datetime(2024, 5, 2, 1, 0, tzinfo=timezone(timedelta(hours=3)))
    assert canonical_day(late) == date(2024, 5, 1)


def test_naive_datetime_read_as_utc():
    assert canonical_day(datetime(2024, 5, 1, 23, 59)) == date(2024, 5, 1)


@pytest.mark.parametrize("value", [None, "", "  ", "01/05/2024", "tomorrow"])
def test_rejects_missing_or_malformed(value):
    with pytest.raises(ValueError):
        canonical_day(value)


def test_rejects_other_types():
    with pytest.raises(TypeError):
        canonical_day(20240501)
