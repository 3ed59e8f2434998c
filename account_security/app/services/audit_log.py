"""
Audit Log

Best-effort recorder for security audit entries.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from account_security.app.services.clock import Clock
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.domain.entities import SecurityAuditLogEntry


class AuditLog:
    """
    Append-only security audit trail.

    Business Rules:
    - Writes never propagate failures: a broken audit table must not stop a
      user from resetting a password or an admin from unlocking an account
    - With a unit of work, the entry joins that transaction inside a savepoint
    - Without one, the entry is written in its own transaction
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        clock: Clock,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow_factory = uow_factory
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    async def record(
        self, entry: SecurityAuditLogEntry, uow: Optional[UnitOfWork] = None
    ) -> None:
        entry.created_at = self.clock.now()
        try:
            if uow is not None:
                async with uow.savepoint():
                    await uow.security_audit_log.create(entry)
                return

            async with self.uow_factory() as audit_uow:
                await audit_uow.security_audit_log.create(entry)
                await audit_uow.commit()
        except Exception:
            # AUDIT_WRITE_FAILURE is absorbed here
            self.logger.exception(
                "Failed to record security audit entry %s for user %s",
                entry.action,
                entry.user_id,
            )

    async def purge_older_than(self, cutoff: datetime) -> int:
        async with self.uow_factory() as uow:
            deleted = await uow.security_audit_log.delete_created_before(cutoff)
            await uow.commit()
        return deleted
