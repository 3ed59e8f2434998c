from typing import Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from account_security.app.errors import ConcurrentUpdateError
from account_security.app.repositories.user_repository import IUserRepository
from account_security.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email_for_update(self, email: str) -> Optional[User]:
        """Get user by email address and lock the row (no-op on SQLite)"""
        stmt = (
            select(User)
            .where(func.lower(User.email) == email.lower())
            .with_for_update()
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id_for_update(self, user_id: UUID) -> Optional[User]:
        """Get user by ID and lock the row (no-op on SQLite)"""
        stmt = select(User).where(User.id == user_id).with_for_update()
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update_security_state(self, user: User, expected_version: int) -> User:
        """Compare-and-set write of the security columns and email"""
        stmt = (
            update(User)
            .where(User.id == user.id, User.security_version == expected_version)
            .values(
                email=user.email,
                password_hash=user.password_hash,
                failed_login_attempts=user.failed_login_attempts,
                account_locked_until=user.account_locked_until,
                last_failed_login=user.last_failed_login,
                last_password_reset=user.last_password_reset,
                last_successful_login=user.last_successful_login,
                security_version=expected_version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            raise ConcurrentUpdateError(user.id, expected_version)

        # Reload so the in-session object matches the row we just wrote
        await self.session.refresh(user)
        return user
