from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from account_security.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_active_by_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[PasswordResetToken]:
        """Get an unused, unexpired password reset token by token hash"""
        pass

    @abstractmethod
    async def count_created_since(self, user_id: UUID, since: datetime) -> int:
        """Count tokens issued to a user with created_at after since"""
        pass

    @abstractmethod
    async def get_oldest_created_since(
        self, user_id: UUID, since: datetime
    ) -> Optional[datetime]:
        """created_at of the oldest token issued to a user after since"""
        pass

    @abstractmethod
    async def mark_used(self, token_hash: str, user_id: UUID, used_at: datetime) -> bool:
        """
        Mark a single unused token as used.

        Returns:
            False if the token was already used or does not belong to user_id
        """
        pass

    @abstractmethod
    async def invalidate_all_for_user(self, user_id: UUID, used_at: datetime) -> int:
        """Mark every unused token of a user as used, returns affected row count"""
        pass

    @abstractmethod
    async def delete_expired_before(self, cutoff: datetime) -> int:
        """Delete tokens whose expires_at is before cutoff, returns deleted count"""
        pass
