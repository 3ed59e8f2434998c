from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from account_security.domain.entities import AccountLockoutHistory


class IAccountLockoutHistoryRepository(ABC):
    """AccountLockoutHistory repository interface - application layer"""

    @abstractmethod
    async def create(self, record: AccountLockoutHistory) -> AccountLockoutHistory:
        """Record a new lockout window"""
        pass

    @abstractmethod
    async def get_by_user(self, user_id: UUID) -> List[AccountLockoutHistory]:
        """Get lockout history for a user ordered by locked_at DESC"""
        pass

    @abstractmethod
    async def close_open_for_user(
        self, user_id: UUID, unlocked_at: datetime, unlocked_by: Optional[str]
    ) -> int:
        """Stamp unlocked_at on every open lockout row of a user"""
        pass
