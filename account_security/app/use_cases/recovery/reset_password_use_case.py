"""
Reset Password Use Case

Completes a password reset: new password, token consumption and
sibling token invalidation in a single transaction.
"""

import logging
from typing import Optional
from uuid import UUID

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.audit_log import AuditLog
from account_security.app.services.clock import Clock
from account_security.app.services.email_service import (
    PASSWORD_RESET_CONFIRMATION_TEMPLATE,
    IEmailService,
)
from account_security.app.services.password_policy import PasswordPolicy
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.app.use_cases.concurrency import retry_on_concurrent_update
from account_security.domain.entities import SecurityAction, SecurityAuditLogEntry
from account_security.libs.result import Error, Result, Return
from .dtos import ResetPasswordResponse, VerifyResetTokenResponse
from .verify_reset_token_use_case import INVALID_TOKEN_MESSAGE, VerifyResetTokenUseCase


class ResetPasswordUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - Token is re-verified here, never trusted from an earlier verify call
    - Weak passwords are rejected before anything is written; the token
      stays usable
    - Password hash, last_password_reset, cleared lockout counters and token
      consumption (including all sibling tokens) commit together or not at all
    - Completion audit and confirmation email happen after commit
    - Failures roll back, are audited as password_reset_failed outside the
      transaction and surface as an opaque error
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_store: RecoveryTokenStore,
        password_policy: PasswordPolicy,
        audit_log: AuditLog,
        email_service: IEmailService,
        clock: Clock,
        settings: SecuritySettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow = uow
        self.token_store = token_store
        self.password_policy = password_policy
        self.audit_log = audit_log
        self.email_service = email_service
        self.clock = clock
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    async def execute(
        self,
        token: str,
        new_password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[ResetPasswordResponse]:
        """
        Execute reset password use case.

        Args:
            token: Plain reset token from the email link
            new_password: Password to set
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            Result with ResetPasswordResponse, or Error

        Errors:
            - INVALID_OR_EXPIRED_TOKEN: Token unknown, used or expired
            - WEAK_PASSWORD: Password fails the strength policy
            - TRANSACTION_FAILURE: Anything went wrong while writing
        """
        verification = await VerifyResetTokenUseCase(self.uow, self.token_store).execute(token)
        if verification.is_err():
            return Return.err(verification.error)
        target = verification.value

        validation = self.password_policy.validate(new_password)
        if not validation.valid:
            return Return.err(
                Error(
                    SecurityErrorCode.WEAK_PASSWORD,
                    validation.message,
                    {"requirements": validation.requirements.model_dump()},
                )
            )

        try:
            password_hash = self.password_policy.hash(new_password)
            consumed = await retry_on_concurrent_update(
                lambda: self._apply_reset(token, target.user_id, password_hash),
                self.settings.concurrent_update_retries,
                self.logger,
            )
        except Exception as exc:
            self.logger.exception("Password reset failed for user %s", target.user_id)
            await self._record(target, False, ip_address, user_agent, {"error": type(exc).__name__})
            return Return.err(
                Error(SecurityErrorCode.TRANSACTION_FAILURE, "Failed to reset password")
            )

        if not consumed:
            # Another request consumed the token between verify and commit
            return Return.err(
                Error(SecurityErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_TOKEN_MESSAGE)
            )

        await self._record(target, True, ip_address, user_agent, {"email": target.email})
        await self._send_confirmation_email(target)

        return Return.ok(
            ResetPasswordResponse(
                success=True,
                message="Password reset successfully. You can now log in with your new password.",
                user_id=target.user_id,
            )
        )

    async def _apply_reset(self, token: str, user_id: UUID, password_hash: str) -> bool:
        async with self.uow:
            user = await self.uow.users.get_by_id_for_update(user_id)
            if user is None:
                return False

            now = self.clock.now()
            expected_version = user.security_version
            user.password_hash = password_hash
            user.last_password_reset = now
            user.failed_login_attempts = 0
            user.account_locked_until = None
            await self.uow.users.update_security_state(user, expected_version)

            if not await self.token_store.consume(self.uow, token, user_id):
                await self.uow.rollback()
                return False

            await self.uow.commit()
            return True

    async def _record(
        self,
        target: VerifyResetTokenResponse,
        success: bool,
        ip_address: Optional[str],
        user_agent: Optional[str],
        details: dict,
    ) -> None:
        action = (
            SecurityAction.password_reset_completed
            if success
            else SecurityAction.password_reset_failed
        )
        await self.audit_log.record(
            SecurityAuditLogEntry(
                user_id=target.user_id,
                action=action.value,
                resource_type="user",
                resource_id=str(target.user_id),
                ip_address=ip_address,
                user_agent=user_agent,
                success=success,
                details=details,
            )
        )

    async def _send_confirmation_email(self, target: VerifyResetTokenResponse) -> None:
        try:
            await self.email_service.send_email(
                to=target.email,
                subject="Your Password Has Been Reset",
                template=PASSWORD_RESET_CONFIRMATION_TEMPLATE,
                data={
                    "first_name": target.first_name,
                    "login_url": f"{self.settings.frontend_url}/login",
                },
            )
        except Exception:
            self.logger.exception(
                "Failed to send password reset confirmation to user %s", target.user_id
            )
