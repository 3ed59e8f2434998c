from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from account_security.app.repositories.account_lockout_history_repository import (
    IAccountLockoutHistoryRepository,
)
from account_security.domain.entities import AccountLockoutHistory


class AccountLockoutHistoryRepository(IAccountLockoutHistoryRepository):
    """AccountLockoutHistory repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: AccountLockoutHistory) -> AccountLockoutHistory:
        """Record a new lockout window"""
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def get_by_user(self, user_id: UUID) -> List[AccountLockoutHistory]:
        """Get lockout history for a user ordered by locked_at DESC"""
        stmt = (
            select(AccountLockoutHistory)
            .where(AccountLockoutHistory.user_id == user_id)
            .order_by(AccountLockoutHistory.locked_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def close_open_for_user(
        self, user_id: UUID, unlocked_at: datetime, unlocked_by: Optional[str]
    ) -> int:
        """Stamp unlocked_at on every open lockout row of a user"""
        stmt = (
            update(AccountLockoutHistory)
            .where(
                AccountLockoutHistory.user_id == user_id,
                AccountLockoutHistory.unlocked_at == None,  # noqa: E711
            )
            .values(unlocked_at=unlocked_at, unlocked_by=unlocked_by, auto_unlocked=False)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
