"""Time sources. Everything that needs "now" takes one of these as an argument."""
from datetime import datetime, timedelta, timezone


def system_now() -> datetime:
    return datetime.now(timezone.utc)


class FixedClock:
    """A clock that only moves when told to."""

    def __init__(self, start: datetime):
        if start.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware datetime")
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, days: float = 0, **kwargs) -> datetime:
        self.current = self.current + timedelta(days=days, **kwargs)
        return self.current
