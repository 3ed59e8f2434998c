"""
Recovery Token Store

Issues, looks up and consumes password reset and account recovery tokens
inside the caller's unit of work.
"""

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.clock import Clock
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.token_generator import TokenGenerator
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.domain.entities import (
    AccountRecoveryToken,
    PasswordResetToken,
    RecoveryType,
)
from account_security.libs.result import Error, Result, Return


@dataclass(frozen=True)
class IssuedToken:
    token: str  # plain token, only ever sent to the user
    record: PasswordResetToken


@dataclass(frozen=True)
class IssuedAccountRecoveryToken:
    token: str
    record: AccountRecoveryToken


class RecoveryTokenStore:
    """
    Recovery token persistence.

    Business Rules:
    - At most max_reset_attempts tokens per user in any trailing
      reset_attempt_window (sliding window over created_at)
    - Tokens expire token_expiry after issuance
    - Lookup never distinguishes unknown, used and expired tokens
    - Consuming a token invalidates every other unused token of the user
    - Account recovery tokens expire account_recovery_token_expiry after
      issuance and are consumed one at a time

    issue() relies on the caller holding the user row lock so the
    count-then-insert sequence is serialized per user.
    """

    def __init__(
        self,
        token_generator: TokenGenerator,
        clock: Clock,
        settings: SecuritySettings,
    ):
        self.token_generator = token_generator
        self.clock = clock
        self.settings = settings

    async def issue(
        self,
        uow: UnitOfWork,
        user_id: UUID,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[IssuedToken]:
        now = self.clock.now()
        window_start = now - self.settings.reset_attempt_window

        recent = await uow.password_reset_tokens.count_created_since(user_id, window_start)
        if recent >= self.settings.max_reset_attempts:
            oldest = await uow.password_reset_tokens.get_oldest_created_since(
                user_id, window_start
            )
            retry_after = self.settings.reset_attempt_window
            if oldest is not None:
                retry_after = oldest + self.settings.reset_attempt_window - now
            return Return.err(
                Error(
                    SecurityErrorCode.RATE_LIMITED,
                    "Too many password reset attempts. Please try again later.",
                    {"retry_after_seconds": max(1, math.ceil(retry_after.total_seconds()))},
                )
            )

        token = self.token_generator.generate()
        record = PasswordResetToken(
            user_id=user_id,
            token_hash=self.token_generator.hash(token),
            used=False,
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=now + self.settings.token_expiry,
            created_at=now,
        )
        record = await uow.password_reset_tokens.create(record)

        return Return.ok(IssuedToken(token=token, record=record))

    async def lookup(self, uow: UnitOfWork, token: str) -> Optional[PasswordResetToken]:
        if not token:
            return None
        return await uow.password_reset_tokens.get_active_by_token_hash(
            self.token_generator.hash(token), self.clock.now()
        )

    async def consume(self, uow: UnitOfWork, token: str, user_id: UUID) -> bool:
        now = self.clock.now()
        consumed = await uow.password_reset_tokens.mark_used(
            self.token_generator.hash(token), user_id, now
        )
        if not consumed:
            return False

        await uow.password_reset_tokens.invalidate_all_for_user(user_id, now)
        return True

    async def cleanup_expired(self, uow: UnitOfWork) -> int:
        cutoff = self.clock.now() - timedelta(
            hours=self.settings.expired_token_retention_hours
        )
        return await uow.password_reset_tokens.delete_expired_before(cutoff)

    async def issue_account_recovery(
        self,
        uow: UnitOfWork,
        user_id: UUID,
        recovery_type: RecoveryType,
        recovery_data: Optional[dict] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> IssuedAccountRecoveryToken:
        now = self.clock.now()
        token = self.token_generator.generate()
        record = AccountRecoveryToken(
            user_id=user_id,
            token_hash=self.token_generator.hash(token),
            recovery_type=recovery_type.value,
            recovery_data=recovery_data or {},
            used=False,
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=now + self.settings.account_recovery_token_expiry,
            created_at=now,
        )
        record = await uow.account_recovery_tokens.create(record)
        return IssuedAccountRecoveryToken(token=token, record=record)

    async def lookup_account_recovery(
        self, uow: UnitOfWork, token: str
    ) -> Optional[AccountRecoveryToken]:
        if not token:
            return None
        return await uow.account_recovery_tokens.get_active_by_token_hash(
            self.token_generator.hash(token), self.clock.now()
        )

    async def consume_account_recovery(self, uow: UnitOfWork, token: str, user_id: UUID) -> bool:
        return await uow.account_recovery_tokens.mark_used(
            self.token_generator.hash(token), user_id, self.clock.now()
        )

    async def cleanup_expired_account_recovery(self, uow: UnitOfWork) -> int:
        cutoff = self.clock.now() - timedelta(
            hours=self.settings.expired_token_retention_hours
        )
        return await uow.account_recovery_tokens.delete_expired_before(cutoff)
