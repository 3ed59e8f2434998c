from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from account_security.app.repositories.account_recovery_token_repository import (
    IAccountRecoveryTokenRepository,
)
from account_security.domain.entities import AccountRecoveryToken


class AccountRecoveryTokenRepository(IAccountRecoveryTokenRepository):
    """AccountRecoveryToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: AccountRecoveryToken) -> AccountRecoveryToken:
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_active_by_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[AccountRecoveryToken]:
        stmt = select(AccountRecoveryToken).where(
            AccountRecoveryToken.token_hash == token_hash,
            AccountRecoveryToken.used == False,  # noqa: E712
            AccountRecoveryToken.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def mark_used(self, token_hash: str, user_id: UUID, used_at: datetime) -> bool:
        stmt = (
            update(AccountRecoveryToken)
            .where(
                AccountRecoveryToken.token_hash == token_hash,
                AccountRecoveryToken.user_id == user_id,
                AccountRecoveryToken.used == False,  # noqa: E712
                AccountRecoveryToken.expires_at > used_at,
            )
            .values(used=True, used_at=used_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def delete_expired_before(self, cutoff: datetime) -> int:
        stmt = delete(AccountRecoveryToken).where(AccountRecoveryToken.expires_at < cutoff)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
