from datetime import date, timedelta

from innkeeper.utils.datetime_utils import DateTimeHelper


def days_ahead(n: int) -> date:
    """A date n days after today in the service timezone."""
    return DateTimeHelper.today("UTC") + timedelta(days=n)
