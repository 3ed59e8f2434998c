"""
Unlock Account Use Case

Administrative override that clears a lockout.
"""

import logging
from typing import Optional
from uuid import UUID

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.audit_log import AuditLog
from account_security.app.services.clock import Clock
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.app.use_cases.concurrency import retry_on_concurrent_update
from account_security.domain.entities import SecurityAction, SecurityAuditLogEntry
from account_security.libs.result import Error, Result, Return
from .dtos import UnlockAccountResponse


class UnlockAccountUseCase:
    """
    Use case for unlocking an account.

    Business Rules:
    - Zeroes failed_login_attempts and clears account_locked_until
    - Closes open lockout history rows, stamping the admin id
    - account_unlocked audit entry joins the same transaction
    - Unknown user ids fail with NOT_FOUND
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit_log: AuditLog,
        clock: Clock,
        settings: SecuritySettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow = uow
        self.audit_log = audit_log
        self.clock = clock
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    async def execute(
        self,
        user_id: UUID,
        reason: str = "manual_unlock",
        admin_id: Optional[str] = None,
    ) -> Result[UnlockAccountResponse]:
        return await retry_on_concurrent_update(
            lambda: self._unlock(user_id, reason, admin_id),
            self.settings.concurrent_update_retries,
            self.logger,
        )

    async def _unlock(
        self, user_id: UUID, reason: str, admin_id: Optional[str]
    ) -> Result[UnlockAccountResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id_for_update(user_id)
            if user is None:
                return Return.err(Error(SecurityErrorCode.NOT_FOUND, "User not found"))

            now = self.clock.now()
            expected_version = user.security_version
            user.failed_login_attempts = 0
            user.account_locked_until = None
            await self.uow.users.update_security_state(user, expected_version)

            await self.uow.lockout_history.close_open_for_user(user.id, now, admin_id)

            await self.audit_log.record(
                SecurityAuditLogEntry(
                    user_id=user.id,
                    action=SecurityAction.account_unlocked.value,
                    resource_type="user",
                    resource_id=str(user.id),
                    success=True,
                    details={"reason": reason, "admin_id": admin_id, "email": user.email},
                ),
                uow=self.uow,
            )

            await self.uow.commit()

        self.logger.info("User %s unlocked (%s)", user.id, reason)
        return Return.ok(
            UnlockAccountResponse(
                success=True,
                message="Account unlocked successfully",
                email=user.email,
            )
        )
