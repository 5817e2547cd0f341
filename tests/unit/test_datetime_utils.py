from datetime import date, datetime

import pytest

from innkeeper.utils.datetime_utils import DateTimeHelper


@pytest.mark.parametrize(
    "value",
    [date(2030, 1, 10), datetime(2030, 1, 10, 18, 45), "2030-01-10", "2030-01-10T09:30:00Z", "Jan 10 2030"],
)
def test_to_date_normalizes_to_calendar_day(value):
    assert DateTimeHelper.to_date(value) == date(2030, 1, 10)


@pytest.mark.parametrize("value", ["", "not-a-date", None])
def test_to_date_rejects_garbage(value):
    with pytest.raises((ValueError, OverflowError)):
        DateTimeHelper.to_date(value)


def test_nights_between():
    assert DateTimeHelper.nights_between(date(2030, 1, 1), date(2030, 1, 3)) == 2

