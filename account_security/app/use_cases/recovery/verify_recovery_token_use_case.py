"""
Verify Recovery Token Use Case

Read-only check that an account recovery token can still be used.
"""

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.domain.entities import RecoveryType
from account_security.libs.result import Error, Result, Return
from .dtos import VerifyRecoveryTokenResponse

INVALID_RECOVERY_TOKEN_MESSAGE = "This recovery link is invalid or has expired."


class VerifyRecoveryTokenUseCase:
    """
    Use case for verifying an account recovery token.

    Business Rules:
    - No mutation and no audit entry
    - Unknown, used and expired tokens produce the same error
    """

    def __init__(self, uow: UnitOfWork, token_store: RecoveryTokenStore):
        self.uow = uow
        self.token_store = token_store

    async def execute(self, token: str) -> Result[VerifyRecoveryTokenResponse]:
        async with self.uow:
            record = await self.token_store.lookup_account_recovery(self.uow, token)
            user = None
            if record is not None:
                user = await self.uow.users.get_by_id(record.user_id)

            if record is None or user is None:
                return Return.err(
                    Error(
                        SecurityErrorCode.INVALID_OR_EXPIRED_TOKEN,
                        INVALID_RECOVERY_TOKEN_MESSAGE,
                    )
                )

            return Return.ok(
                VerifyRecoveryTokenResponse(
                    valid=True,
                    user_id=user.id,
                    email=user.email,
                    first_name=user.first_name,
                    recovery_type=RecoveryType(record.recovery_type),
                    recovery_data=record.recovery_data or {},
                    expires_at=record.expires_at,
                )
            )
