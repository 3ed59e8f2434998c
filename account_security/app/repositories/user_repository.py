from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from account_security.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_email_for_update(self, email: str) -> Optional[User]:
        """Get user by email address and lock the row until the transaction ends"""
        pass

    @abstractmethod
    async def get_by_id_for_update(self, user_id: UUID) -> Optional[User]:
        """Get user by ID and lock the row until the transaction ends"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update_security_state(self, user: User, expected_version: int) -> User:
        """
        Persist the security columns and email of a user with a compare-and-set on
        security_version.

        Raises:
            ConcurrentUpdateError: the row was changed since expected_version was read
        """
        pass
