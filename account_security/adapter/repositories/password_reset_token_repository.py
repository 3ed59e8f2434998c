from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from account_security.app.repositories.password_reset_token_repository import (
    IPasswordResetTokenRepository,
)
from account_security.domain.entities import PasswordResetToken


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_active_by_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[PasswordResetToken]:
        """Get an unused, unexpired password reset token by token hash"""
        stmt = select(PasswordResetToken).where(
            PasswordResetToken.token_hash == token_hash,
            PasswordResetToken.used == False,  # noqa: E712
            PasswordResetToken.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def count_created_since(self, user_id: UUID, since: datetime) -> int:
        """Count tokens issued to a user with created_at after since"""
        stmt = select(func.count(PasswordResetToken.id)).where(
            PasswordResetToken.user_id == user_id,
            PasswordResetToken.created_at > since,
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def get_oldest_created_since(
        self, user_id: UUID, since: datetime
    ) -> Optional[datetime]:
        """created_at of the oldest token issued to a user after since"""
        stmt = select(func.min(PasswordResetToken.created_at)).where(
            PasswordResetToken.user_id == user_id,
            PasswordResetToken.created_at > since,
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def mark_used(self, token_hash: str, user_id: UUID, used_at: datetime) -> bool:
        """Mark a single unused, unexpired token as used"""
        stmt = (
            update(PasswordResetToken)
            .where(
                PasswordResetToken.token_hash == token_hash,
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.used == False,  # noqa: E712
                PasswordResetToken.expires_at > used_at,
            )
            .values(used=True, used_at=used_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def invalidate_all_for_user(self, user_id: UUID, used_at: datetime) -> int:
        """Mark every unused token of a user as used"""
        stmt = (
            update(PasswordResetToken)
            .where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.used == False,  # noqa: E712
            )
            .values(used=True, used_at=used_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_expired_before(self, cutoff: datetime) -> int:
        """Delete tokens whose expires_at is before cutoff"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.expires_at < cutoff)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
