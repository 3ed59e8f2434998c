"""
Lockout Policy Engine

Pure decision logic for failed login counters and progressive lockout.
No I/O: the caller supplies the current state and the time.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class LockoutState:
    failed_attempts: int
    locked_until: Optional[datetime]


@dataclass(frozen=True)
class LockoutDecision:
    failed_attempts: int
    locked_until: Optional[datetime]
    lock_started: bool = False  # a new or escalated lockout window begins now


class LockoutPolicyEngine:
    """
    Progressive lockout.

    Business Rules:
    - Once a lockout has elapsed, the next failure starts a new window at 1
    - Reaching max_failed_logins locks the account for base_lockout_duration
    - Further failures while locked leave the lockout untouched until another
      full block of max_failed_logins failures is reached
    - Block n (n = failed_attempts // max_failed_logins) locks for
      base_lockout_duration * multiplier ** (n - 1)
    """

    def __init__(
        self,
        max_failed_logins: int = 5,
        base_lockout_duration: timedelta = timedelta(minutes=15),
        progressive_multiplier: int = 2,
    ):
        self.max_failed_logins = max_failed_logins
        self.base_lockout_duration = base_lockout_duration
        self.progressive_multiplier = progressive_multiplier

    def is_locked(self, locked_until: Optional[datetime], now: datetime) -> bool:
        return locked_until is not None and locked_until > now

    def lockout_duration_for(self, failed_attempts: int) -> timedelta:
        block = failed_attempts // self.max_failed_logins
        return self.base_lockout_duration * (self.progressive_multiplier ** (block - 1))

    def evaluate_failed_login(self, current: LockoutState, now: datetime) -> LockoutDecision:
        locked_until = current.locked_until

        if locked_until is not None and locked_until <= now:
            failed_attempts = 1
            locked_until = None
        else:
            failed_attempts = max(current.failed_attempts, 0) + 1

        closes_block = failed_attempts % self.max_failed_logins == 0
        if failed_attempts >= self.max_failed_logins and (locked_until is None or closes_block):
            return LockoutDecision(
                failed_attempts=failed_attempts,
                locked_until=now + self.lockout_duration_for(failed_attempts),
                lock_started=True,
            )

        return LockoutDecision(failed_attempts=failed_attempts, locked_until=locked_until)

    def remaining_attempts(self, failed_attempts: int) -> int:
        return max(0, self.max_failed_logins - failed_attempts)
