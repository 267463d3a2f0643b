"""Time helpers; engines take a ``now`` callable so tests can pin the date."""
from collections.abc import Callable
from datetime import date, datetime, timezone

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_day(moment: datetime | date) -> str:
    """Return the ``yyyy-mm-dd`` form used for streak bookkeeping."""
    if isinstance(moment, datetime):
        moment = moment.date()
    return moment.isoformat()
