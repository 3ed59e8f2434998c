"""
Check Account Lockout Use Case

Read-only lockout status for the login path.
"""

import math

from account_security.app.services.clock import Clock
from account_security.app.services.lockout_policy import LockoutPolicyEngine
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.libs.result import Result, Return
from .dtos import AccountLockoutStatus


class CheckAccountLockoutUseCase:
    """
    Use case for reading lockout status.

    Business Rules:
    - No mutation
    - remaining_time is in whole minutes, rounded up
    - An elapsed lockout reports locked=False
    """

    def __init__(self, uow: UnitOfWork, lockout_policy: LockoutPolicyEngine, clock: Clock):
        self.uow = uow
        self.lockout_policy = lockout_policy
        self.clock = clock

    async def execute(self, email: str) -> Result[AccountLockoutStatus]:
        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())
            if user is None:
                return Return.ok(AccountLockoutStatus(locked=False, exists=False))

            # Read the row before the unit of work ends and expires it
            return Return.ok(self._status(user.account_locked_until, user.failed_login_attempts))

    def _status(self, locked_until, failed_attempts) -> AccountLockoutStatus:
        now = self.clock.now()
        if self.lockout_policy.is_locked(locked_until, now):
            return AccountLockoutStatus(
                locked=True,
                exists=True,
                locked_until=locked_until,
                remaining_time=math.ceil((locked_until - now).total_seconds() / 60),
                failed_attempts=failed_attempts,
            )

        return AccountLockoutStatus(locked=False, exists=True, failed_attempts=failed_attempts or 0)
