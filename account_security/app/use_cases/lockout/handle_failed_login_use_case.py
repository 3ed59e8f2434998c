"""
Handle Failed Login Use Case

Counts a failed login and applies progressive lockout.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from account_security.app.services.audit_log import AuditLog
from account_security.app.services.clock import Clock
from account_security.app.services.lockout_policy import (
    LockoutDecision,
    LockoutPolicyEngine,
    LockoutState,
)
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.app.use_cases.concurrency import retry_on_concurrent_update
from account_security.domain.entities import (
    AccountLockoutHistory,
    LockoutReason,
    SecurityAction,
    SecurityAuditLogEntry,
    User,
)
from account_security.libs.result import Result, Return
from .dtos import FailedLoginResponse


class HandleFailedLoginUseCase:
    """
    Use case for recording a failed login attempt.

    Business Rules:
    - Counter read, evaluation and write happen under the user row lock in
      one transaction (no lost increments)
    - Unknown emails get a neutral response and nothing is written
    - A lockout history row is written whenever a lockout starts or escalates
    - Audit entries are written after commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        lockout_policy: LockoutPolicyEngine,
        audit_log: AuditLog,
        clock: Clock,
        settings: SecuritySettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow = uow
        self.lockout_policy = lockout_policy
        self.audit_log = audit_log
        self.clock = clock
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    async def execute(
        self,
        email: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[FailedLoginResponse]:
        """
        Execute handle failed login use case.

        Args:
            email: Address used in the failed login (any case)
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            Result with FailedLoginResponse
        """
        outcome = await retry_on_concurrent_update(
            lambda: self._apply(email.strip().lower(), ip_address, user_agent),
            self.settings.concurrent_update_retries,
            self.logger,
        )

        if outcome is None:
            return Return.ok(
                FailedLoginResponse(
                    account_locked=False,
                    failed_attempts=0,
                    lockout_until=None,
                    remaining_attempts=self.lockout_policy.max_failed_logins,
                )
            )

        user, decision, now = outcome
        account_locked = self.lockout_policy.is_locked(decision.locked_until, now)

        await self.audit_log.record(
            SecurityAuditLogEntry(
                user_id=user.id,
                action=SecurityAction.failed_login_attempt.value,
                resource_type="user",
                resource_id=str(user.id),
                ip_address=ip_address,
                user_agent=user_agent,
                success=False,
                details={
                    "email": user.email,
                    "failed_attempts": decision.failed_attempts,
                    "account_locked": account_locked,
                    "lockout_until": (
                        decision.locked_until.isoformat() if decision.locked_until else None
                    ),
                },
            )
        )

        if decision.lock_started:
            self.logger.warning(
                "User %s locked until %s after %d failed logins",
                user.id,
                decision.locked_until.isoformat(),
                decision.failed_attempts,
            )
            await self.audit_log.record(
                SecurityAuditLogEntry(
                    user_id=user.id,
                    action=SecurityAction.account_locked.value,
                    resource_type="user",
                    resource_id=str(user.id),
                    ip_address=ip_address,
                    user_agent=user_agent,
                    success=True,
                    details={
                        "failed_attempts": decision.failed_attempts,
                        "lockout_until": decision.locked_until.isoformat(),
                    },
                )
            )

        return Return.ok(
            FailedLoginResponse(
                account_locked=account_locked,
                failed_attempts=decision.failed_attempts,
                lockout_until=decision.locked_until if account_locked else None,
                remaining_attempts=self.lockout_policy.remaining_attempts(
                    decision.failed_attempts
                ),
            )
        )

    async def _apply(
        self,
        email: str,
        ip_address: Optional[str],
        user_agent: Optional[str],
    ) -> Optional[Tuple[User, LockoutDecision, datetime]]:
        async with self.uow:
            user = await self.uow.users.get_by_email_for_update(email)
            if user is None:
                return None

            now = self.clock.now()
            expected_version = user.security_version
            decision = self.lockout_policy.evaluate_failed_login(
                LockoutState(
                    failed_attempts=user.failed_login_attempts,
                    locked_until=user.account_locked_until,
                ),
                now,
            )

            user.failed_login_attempts = decision.failed_attempts
            user.account_locked_until = decision.locked_until
            user.last_failed_login = now
            await self.uow.users.update_security_state(user, expected_version)

            if decision.lock_started:
                escalated = decision.failed_attempts > self.lockout_policy.max_failed_logins
                await self.uow.lockout_history.create(
                    AccountLockoutHistory(
                        user_id=user.id,
                        lockout_reason=(
                            LockoutReason.progressive_escalation.value
                            if escalated
                            else LockoutReason.failed_logins.value
                        ),
                        lockout_duration_minutes=int(
                            (decision.locked_until - now).total_seconds() // 60
                        ),
                        failed_attempts_count=decision.failed_attempts,
                        ip_address=ip_address,
                        user_agent=user_agent,
                        locked_at=now,
                    )
                )

            await self.uow.commit()
            return user, decision, now
