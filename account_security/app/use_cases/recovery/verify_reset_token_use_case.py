"""
Verify Reset Token Use Case

Read-only check that a password reset token can still be used.
"""

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.libs.result import Error, Result, Return
from .dtos import VerifyResetTokenResponse

INVALID_TOKEN_MESSAGE = "This password reset link is invalid or has expired."


class VerifyResetTokenUseCase:
    """
    Use case for verifying a password reset token.

    Business Rules:
    - No mutation and no audit entry (forms call this repeatedly)
    - Unknown, used and expired tokens produce the same error
    """

    def __init__(self, uow: UnitOfWork, token_store: RecoveryTokenStore):
        self.uow = uow
        self.token_store = token_store

    async def execute(self, token: str) -> Result[VerifyResetTokenResponse]:
        async with self.uow:
            record = await self.token_store.lookup(self.uow, token)
            user = None
            if record is not None:
                user = await self.uow.users.get_by_id(record.user_id)

            if record is None or user is None:
                return Return.err(
                    Error(SecurityErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_TOKEN_MESSAGE)
                )

            return Return.ok(
                VerifyResetTokenResponse(
                    valid=True,
                    user_id=user.id,
                    email=user.email,
                    first_name=user.first_name,
                    expires_at=record.expires_at,
                )
            )
