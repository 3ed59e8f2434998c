"""
Account Security Service

Public entry point for password reset, account recovery and login lockout.
Each call runs its use case on a fresh unit of work so concurrent calls
never share a database session.
"""

import logging
from typing import Awaitable, Callable, Optional, TypeVar, Union
from uuid import UUID

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.audit_log import AuditLog
from account_security.app.services.clock import Clock, SystemClock
from account_security.app.services.email_service import IEmailService
from account_security.app.services.lockout_policy import LockoutPolicyEngine
from account_security.app.services.password_policy import PasswordPolicy
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.token_generator import TokenGenerator
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.app.use_cases.lockout import (
    AccountLockoutStatus,
    CheckAccountLockoutUseCase,
    FailedLoginResponse,
    HandleFailedLoginUseCase,
    ResetFailedLoginAttemptsResponse,
    ResetFailedLoginAttemptsUseCase,
    UnlockAccountResponse,
    UnlockAccountUseCase,
)
from account_security.app.use_cases.recovery import (
    AccountRecoveryActions,
    CleanupExpiredTokensUseCase,
    CompleteAccountRecoveryResponse,
    CompleteAccountRecoveryUseCase,
    InitiateAccountRecoveryResponse,
    InitiateAccountRecoveryUseCase,
    InitiatePasswordResetResponse,
    InitiatePasswordResetUseCase,
    ResetPasswordResponse,
    ResetPasswordUseCase,
    VerifyRecoveryTokenResponse,
    VerifyRecoveryTokenUseCase,
    VerifyResetTokenResponse,
    VerifyResetTokenUseCase,
)
from account_security.domain.entities import RecoveryType
from account_security.libs.result import Error, Result, Return

T = TypeVar("T")


class AccountSecurityService:
    """
    Orchestrates reset tokens, lockout policy, password policy and audit log.

    Dependencies are injected so tests can swap the store, clock, email
    sender and logger. Unexpected exceptions are logged in full and
    returned as an opaque TRANSACTION_FAILURE.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        email_service: IEmailService,
        settings: Optional[SecuritySettings] = None,
        clock: Optional[Clock] = None,
        token_generator: Optional[TokenGenerator] = None,
        password_policy: Optional[PasswordPolicy] = None,
        lockout_policy: Optional[LockoutPolicyEngine] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow_factory = uow_factory
        self.email_service = email_service
        self.settings = settings or SecuritySettings()
        self.clock = clock or SystemClock()
        self.logger = logger or logging.getLogger(__name__)

        self.password_policy = password_policy or PasswordPolicy(
            self.settings.password_hash_work_factor
        )
        self.lockout_policy = lockout_policy or LockoutPolicyEngine(
            max_failed_logins=self.settings.max_failed_logins,
            base_lockout_duration=self.settings.account_lockout_duration,
            progressive_multiplier=self.settings.progressive_lockout_multiplier,
        )
        self.token_store = RecoveryTokenStore(
            token_generator or TokenGenerator(), self.clock, self.settings
        )
        self.audit_log = AuditLog(uow_factory, self.clock, self.logger)

    async def _guard(self, operation: str, call: Awaitable[Result[T]]) -> Result[T]:
        try:
            return await call
        except Exception:
            self.logger.exception("Account security operation %s failed", operation)
            return Return.err(Error(SecurityErrorCode.TRANSACTION_FAILURE, "Operation failed"))

    # ------------------------------------------------------------------
    # Password recovery
    # ------------------------------------------------------------------

    async def initiate_password_reset(
        self,
        email: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[InitiatePasswordResetResponse]:
        use_case = InitiatePasswordResetUseCase(
            self.uow_factory(),
            self.token_store,
            self.lockout_policy,
            self.audit_log,
            self.email_service,
            self.clock,
            self.settings,
            self.logger,
        )
        return await self._guard(
            "initiate_password_reset", use_case.execute(email, ip_address, user_agent)
        )

    async def verify_reset_token(self, token: str) -> Result[VerifyResetTokenResponse]:
        use_case = VerifyResetTokenUseCase(self.uow_factory(), self.token_store)
        return await self._guard("verify_reset_token", use_case.execute(token))

    async def reset_password(
        self,
        token: str,
        new_password: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[ResetPasswordResponse]:
        use_case = ResetPasswordUseCase(
            self.uow_factory(),
            self.token_store,
            self.password_policy,
            self.audit_log,
            self.email_service,
            self.clock,
            self.settings,
            self.logger,
        )
        return await self._guard(
            "reset_password", use_case.execute(token, new_password, ip_address, user_agent)
        )

    # ------------------------------------------------------------------
    # Account recovery
    # ------------------------------------------------------------------

    async def initiate_account_recovery(
        self,
        email: str,
        recovery_type: Union[RecoveryType, str],
        recovery_data: Optional[dict] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[InitiateAccountRecoveryResponse]:
        use_case = InitiateAccountRecoveryUseCase(
            self.uow_factory(),
            self.token_store,
            self.audit_log,
            self.email_service,
            self.settings,
            self.logger,
        )
        return await self._guard(
            "initiate_account_recovery",
            use_case.execute(email, recovery_type, recovery_data, ip_address, user_agent),
        )

    async def verify_recovery_token(self, token: str) -> Result[VerifyRecoveryTokenResponse]:
        use_case = VerifyRecoveryTokenUseCase(self.uow_factory(), self.token_store)
        return await self._guard("verify_recovery_token", use_case.execute(token))

    async def complete_account_recovery(
        self,
        token: str,
        new_email: Optional[str] = None,
        new_password: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[CompleteAccountRecoveryResponse]:
        use_case = CompleteAccountRecoveryUseCase(
            self.uow_factory(),
            self.token_store,
            self.password_policy,
            self.audit_log,
            self.clock,
            self.settings,
            self.logger,
        )
        actions = AccountRecoveryActions(new_email=new_email, new_password=new_password)
        return await self._guard(
            "complete_account_recovery",
            use_case.execute(token, actions, ip_address, user_agent),
        )

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def cleanup_expired_tokens(self) -> int:
        """Returns the number of reset and recovery tokens removed, 0 when cleanup fails."""
        use_case = CleanupExpiredTokensUseCase(
            self.uow_factory(),
            self.token_store,
            self.audit_log,
            self.clock,
            self.settings,
            self.logger,
        )
        result = await self._guard("cleanup_expired_tokens", use_case.execute())
        if result.is_err():
            return 0
        return result.value.tokens_deleted + result.value.recovery_tokens_deleted

    # ------------------------------------------------------------------
    # Login lockout
    # ------------------------------------------------------------------

    async def handle_failed_login(
        self,
        email: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[FailedLoginResponse]:
        use_case = HandleFailedLoginUseCase(
            self.uow_factory(),
            self.lockout_policy,
            self.audit_log,
            self.clock,
            self.settings,
            self.logger,
        )
        return await self._guard(
            "handle_failed_login", use_case.execute(email, ip_address, user_agent)
        )

    async def check_account_lockout(self, email: str) -> Result[AccountLockoutStatus]:
        use_case = CheckAccountLockoutUseCase(
            self.uow_factory(), self.lockout_policy, self.clock
        )
        return await self._guard("check_account_lockout", use_case.execute(email))

    async def unlock_account(
        self,
        user_id: UUID,
        reason: str = "manual_unlock",
        admin_id: Optional[str] = None,
    ) -> Result[UnlockAccountResponse]:
        use_case = UnlockAccountUseCase(
            self.uow_factory(), self.audit_log, self.clock, self.settings, self.logger
        )
        return await self._guard("unlock_account", use_case.execute(user_id, reason, admin_id))

    async def reset_failed_login_attempts(
        self, user_id: UUID
    ) -> Result[ResetFailedLoginAttemptsResponse]:
        use_case = ResetFailedLoginAttemptsUseCase(
            self.uow_factory(), self.clock, self.settings, self.logger
        )
        return await self._guard("reset_failed_login_attempts", use_case.execute(user_id))
