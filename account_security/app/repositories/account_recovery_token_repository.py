from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from account_security.domain.entities import AccountRecoveryToken


class IAccountRecoveryTokenRepository(ABC):
    """AccountRecoveryToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: AccountRecoveryToken) -> AccountRecoveryToken:
        """Create a new account recovery token"""
        pass

    @abstractmethod
    async def get_active_by_token_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[AccountRecoveryToken]:
        """Get an unused, unexpired account recovery token by token hash"""
        pass

    @abstractmethod
    async def mark_used(self, token_hash: str, user_id: UUID, used_at: datetime) -> bool:
        """
        Mark a single unused, unexpired token as used.

        Returns:
            False if the token was already used, expired or belongs to another user
        """
        pass

    @abstractmethod
    async def delete_expired_before(self, cutoff: datetime) -> int:
        """Delete tokens whose expires_at is before cutoff, returns deleted count"""
        pass
