"""
Complete Account Recovery Use Case

Applies the change an account recovery token was issued for and consumes
the token in a single transaction.
"""

import logging
from typing import Optional
from uuid import UUID

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.audit_log import AuditLog
from account_security.app.services.clock import Clock
from account_security.app.services.password_policy import PasswordPolicy
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.app.use_cases.concurrency import retry_on_concurrent_update
from account_security.domain.entities import RecoveryType, SecurityAction, SecurityAuditLogEntry
from account_security.libs.result import Error, Result, Return
from .dtos import (
    AccountRecoveryActions,
    CompleteAccountRecoveryResponse,
    VerifyRecoveryTokenResponse,
)
from .verify_recovery_token_use_case import (
    INVALID_RECOVERY_TOKEN_MESSAGE,
    VerifyRecoveryTokenUseCase,
)


class CompleteAccountRecoveryUseCase:
    """
    Use case for completing an account recovery.

    Business Rules:
    - Token is re-verified here, never trusted from an earlier verify call
    - email_change needs new_email, which no other account may hold
    - account_recovery needs a new_password that passes the strength policy;
      it clears the lockout counters and invalidates open password reset tokens
    - Invalid requests are rejected before anything is written; the token
      stays usable
    - User change and token consumption commit together or not at all
    - Completion audit happens after commit; unexpected failures are audited
      as account_recovery_failed and surface as an opaque error
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_store: RecoveryTokenStore,
        password_policy: PasswordPolicy,
        audit_log: AuditLog,
        clock: Clock,
        settings: SecuritySettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow = uow
        self.token_store = token_store
        self.password_policy = password_policy
        self.audit_log = audit_log
        self.clock = clock
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    async def execute(
        self,
        token: str,
        actions: AccountRecoveryActions,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[CompleteAccountRecoveryResponse]:
        """
        Execute complete account recovery use case.

        Args:
            token: Plain recovery token from the email link
            actions: New email or new password, depending on the recovery type
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            Result with CompleteAccountRecoveryResponse, or Error

        Errors:
            - INVALID_OR_EXPIRED_TOKEN: Token unknown, used or expired
            - INVALID_RECOVERY_REQUEST: Required action missing for the recovery type
            - WEAK_PASSWORD: New password fails the strength policy
            - EMAIL_IN_USE: New email already belongs to another account
            - TRANSACTION_FAILURE: Anything went wrong while writing
        """
        verification = await VerifyRecoveryTokenUseCase(self.uow, self.token_store).execute(
            token
        )
        if verification.is_err():
            return Return.err(verification.error)
        target = verification.value

        new_email = None
        new_password = None
        if target.recovery_type == RecoveryType.email_change:
            new_email = (actions.new_email or "").strip().lower()
            if "@" not in new_email:
                return Return.err(
                    Error(
                        SecurityErrorCode.INVALID_RECOVERY_REQUEST,
                        "New email address is required",
                    )
                )
        else:
            new_password = actions.new_password
            if not new_password:
                return Return.err(
                    Error(SecurityErrorCode.INVALID_RECOVERY_REQUEST, "New password is required")
                )
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
            password_hash = self.password_policy.hash(new_password) if new_password else None
            error = await retry_on_concurrent_update(
                lambda: self._apply(token, target.user_id, new_email, password_hash),
                self.settings.concurrent_update_retries,
                self.logger,
            )
        except Exception as exc:
            self.logger.exception("Account recovery failed for user %s", target.user_id)
            await self._record(
                target, False, ip_address, user_agent, {"error": type(exc).__name__}
            )
            return Return.err(
                Error(SecurityErrorCode.TRANSACTION_FAILURE, "Failed to complete account recovery")
            )

        if error is not None:
            return Return.err(error)

        details = {"email": target.email, "recovery_type": target.recovery_type.value}
        if new_email is not None:
            details["new_email"] = new_email
        await self._record(target, True, ip_address, user_agent, details)

        return Return.ok(
            CompleteAccountRecoveryResponse(
                success=True,
                message="Account recovery completed successfully.",
                user_id=target.user_id,
                recovery_type=target.recovery_type,
                old_email=target.email,
                new_email=new_email,
                password_reset=password_hash is not None,
            )
        )

    async def _apply(
        self,
        token: str,
        user_id: UUID,
        new_email: Optional[str],
        password_hash: Optional[str],
    ) -> Optional[Error]:
        invalid_token = Error(
            SecurityErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_RECOVERY_TOKEN_MESSAGE
        )
        async with self.uow:
            user = await self.uow.users.get_by_id_for_update(user_id)
            if user is None:
                return invalid_token

            if new_email is not None:
                holder = await self.uow.users.get_by_email(new_email)
                if holder is not None and holder.id != user.id:
                    return Error(
                        SecurityErrorCode.EMAIL_IN_USE,
                        "This email address is already in use",
                    )

            now = self.clock.now()
            expected_version = user.security_version
            if new_email is not None:
                user.email = new_email
            if password_hash is not None:
                user.password_hash = password_hash
                user.last_password_reset = now
                user.failed_login_attempts = 0
                user.account_locked_until = None
            await self.uow.users.update_security_state(user, expected_version)

            if password_hash is not None:
                await self.uow.password_reset_tokens.invalidate_all_for_user(user_id, now)

            if not await self.token_store.consume_account_recovery(self.uow, token, user_id):
                # Another request consumed the token between verify and commit
                await self.uow.rollback()
                return invalid_token

            await self.uow.commit()
            return None

    async def _record(
        self,
        target: VerifyRecoveryTokenResponse,
        success: bool,
        ip_address: Optional[str],
        user_agent: Optional[str],
        details: dict,
    ) -> None:
        action = (
            SecurityAction.account_recovery_completed
            if success
            else SecurityAction.account_recovery_failed
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
