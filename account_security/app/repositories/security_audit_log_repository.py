from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from account_security.domain.entities import SecurityAuditLogEntry


class ISecurityAuditLogRepository(ABC):
    """SecurityAuditLogEntry repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: SecurityAuditLogEntry) -> SecurityAuditLogEntry:
        """Create a new audit entry (immutable)"""
        pass

    @abstractmethod
    async def get_by_user(
        self, user_id: UUID, action: Optional[str] = None, limit: int = 50
    ) -> List[SecurityAuditLogEntry]:
        """Get audit entries for a user ordered by created_at DESC"""
        pass

    @abstractmethod
    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete entries older than cutoff, returns deleted count"""
        pass
