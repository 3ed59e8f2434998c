from datetime import datetime, timedelta

from account_security.app.services.clock import Clock


class FrozenClock(Clock):
    """Clock that only moves when a test advances it"""

    def __init__(self, now: datetime = datetime(2026, 3, 2, 9, 30, 0)):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current
