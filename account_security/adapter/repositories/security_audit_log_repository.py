from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from account_security.app.repositories.security_audit_log_repository import (
    ISecurityAuditLogRepository,
)
from account_security.domain.entities import SecurityAuditLogEntry


class SecurityAuditLogRepository(ISecurityAuditLogRepository):
    """SecurityAuditLogEntry repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: SecurityAuditLogEntry) -> SecurityAuditLogEntry:
        """Create a new audit entry (immutable)"""
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_user(
        self, user_id: UUID, action: Optional[str] = None, limit: int = 50
    ) -> List[SecurityAuditLogEntry]:
        """Get audit entries for a user ordered by created_at DESC"""
        stmt = select(SecurityAuditLogEntry).where(SecurityAuditLogEntry.user_id == user_id)
        if action is not None:
            stmt = stmt.where(SecurityAuditLogEntry.action == action)
        stmt = stmt.order_by(SecurityAuditLogEntry.created_at.desc()).limit(limit)

        result = await self.session.exec(stmt)
        return list(result.all())

    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete entries older than cutoff"""
        stmt = delete(SecurityAuditLogEntry).where(SecurityAuditLogEntry.created_at < cutoff)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
