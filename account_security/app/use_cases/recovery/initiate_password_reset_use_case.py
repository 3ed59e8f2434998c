"""
Initiate Password Reset Use Case

Issues a password reset token and emails the reset link.
"""

import logging
from typing import Optional

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.audit_log import AuditLog
from account_security.app.services.clock import Clock
from account_security.app.services.email_service import (
    PASSWORD_RESET_TEMPLATE,
    IEmailService,
)
from account_security.app.services.lockout_policy import LockoutPolicyEngine
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.domain.entities import SecurityAction, SecurityAuditLogEntry, User
from account_security.libs.result import Error, Result, Return
from .dtos import InitiatePasswordResetResponse

GENERIC_RESET_MESSAGE = (
    "If an account with this email exists, you will receive a password reset link."
)


class InitiatePasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - No email enumeration: unknown emails get the same success shape
      with email_sent=False
    - Locked accounts cannot request a reset until the lockout ends
    - Sliding-window rate limit enforced by RecoveryTokenStore
    - Token row commits before the email is sent; a failed send does not
      revoke the token
    - Audit entry written after commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_store: RecoveryTokenStore,
        lockout_policy: LockoutPolicyEngine,
        audit_log: AuditLog,
        email_service: IEmailService,
        clock: Clock,
        settings: SecuritySettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow = uow
        self.token_store = token_store
        self.lockout_policy = lockout_policy
        self.audit_log = audit_log
        self.email_service = email_service
        self.clock = clock
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    def _response(self, email_sent: bool) -> InitiatePasswordResetResponse:
        return InitiatePasswordResetResponse(
            success=True,
            message=GENERIC_RESET_MESSAGE,
            email_sent=email_sent,
            expires_in=self.settings.token_expiry_minutes,
        )

    async def execute(
        self,
        email: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[InitiatePasswordResetResponse]:
        """
        Execute initiate password reset use case.

        Args:
            email: Address the user typed (any case)
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            Result with InitiatePasswordResetResponse, or Error

        Errors:
            - ACCOUNT_LOCKED: Account is locked, details carry locked_until
            - RATE_LIMITED: Too many tokens issued in the trailing window
        """
        async with self.uow:
            # Row lock serializes concurrent issuance for the same user
            user = await self.uow.users.get_by_email_for_update(email.strip().lower())

            if user is None:
                return Return.ok(self._response(email_sent=False))

            if self.lockout_policy.is_locked(user.account_locked_until, self.clock.now()):
                self.logger.warning("Password reset requested for locked user %s", user.id)
                return Return.err(
                    Error(
                        SecurityErrorCode.ACCOUNT_LOCKED,
                        "Too many failed attempts. Please try again later.",
                        {"locked_until": user.account_locked_until},
                    )
                )

            issued = await self.token_store.issue(self.uow, user.id, ip_address, user_agent)
            if issued.is_err():
                self.logger.warning("Password reset rate limit reached for user %s", user.id)
                return Return.err(issued.error)

            await self.uow.commit()

        email_sent = await self._send_reset_email(user, issued.value.token)

        await self.audit_log.record(
            SecurityAuditLogEntry(
                user_id=user.id,
                action=SecurityAction.password_reset_requested.value,
                resource_type="user",
                resource_id=str(user.id),
                ip_address=ip_address,
                user_agent=user_agent,
                success=True,
                details={
                    "email": user.email,
                    "token_id": str(issued.value.record.id),
                    "token_expiry": issued.value.record.expires_at.isoformat(),
                    "email_sent": email_sent,
                },
            )
        )

        return Return.ok(self._response(email_sent=email_sent))

    async def _send_reset_email(self, user: User, token: str) -> bool:
        reset_url = f"{self.settings.frontend_url}/reset-password?token={token}"
        try:
            await self.email_service.send_email(
                to=user.email,
                subject="Reset Your Password",
                template=PASSWORD_RESET_TEMPLATE,
                data={
                    "first_name": user.first_name,
                    "reset_url": reset_url,
                    "expiry_minutes": self.settings.token_expiry_minutes,
                },
            )
        except Exception:
            # Token stays valid; the user can request another link
            self.logger.exception("Failed to send password reset email to user %s", user.id)
            return False
        return True
