"""
Reset Failed Login Attempts Use Case

Called by the login path after a successful authentication.
"""

import logging
from typing import Optional
from uuid import UUID

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.clock import Clock
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.app.use_cases.concurrency import retry_on_concurrent_update
from account_security.libs.result import Error, Result, Return
from .dtos import ResetFailedLoginAttemptsResponse


class ResetFailedLoginAttemptsUseCase:
    """Zeroes lockout counters and stamps last_successful_login"""

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock,
        settings: SecuritySettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow = uow
        self.clock = clock
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    async def execute(self, user_id: UUID) -> Result[ResetFailedLoginAttemptsResponse]:
        return await retry_on_concurrent_update(
            lambda: self._reset(user_id),
            self.settings.concurrent_update_retries,
            self.logger,
        )

    async def _reset(self, user_id: UUID) -> Result[ResetFailedLoginAttemptsResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id_for_update(user_id)
            if user is None:
                return Return.err(Error(SecurityErrorCode.NOT_FOUND, "User not found"))

            expected_version = user.security_version
            user.failed_login_attempts = 0
            user.account_locked_until = None
            user.last_successful_login = self.clock.now()
            await self.uow.users.update_security_state(user, expected_version)

            await self.uow.commit()

        return Return.ok(ResetFailedLoginAttemptsResponse(success=True))
