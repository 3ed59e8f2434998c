"""
Cleanup Expired Tokens Use Case

Maintenance job invoked by an external scheduler.
"""

import logging
from datetime import timedelta
from typing import Optional

from account_security.app.services.audit_log import AuditLog
from account_security.app.services.clock import Clock
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.libs.result import Result, Return
from .dtos import CleanupExpiredTokensResponse


class CleanupExpiredTokensUseCase:
    """
    Use case for purging stale recovery data.

    Business Rules:
    - Reset and account recovery tokens are deleted once expired for longer
      than the retention period (24h)
    - Audit entries are kept for audit_retention_days (90 days)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_store: RecoveryTokenStore,
        audit_log: AuditLog,
        clock: Clock,
        settings: SecuritySettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow = uow
        self.token_store = token_store
        self.audit_log = audit_log
        self.clock = clock
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    async def execute(self) -> Result[CleanupExpiredTokensResponse]:
        async with self.uow:
            tokens_deleted = await self.token_store.cleanup_expired(self.uow)
            recovery_tokens_deleted = await self.token_store.cleanup_expired_account_recovery(
                self.uow
            )
            await self.uow.commit()

        audit_cutoff = self.clock.now() - timedelta(days=self.settings.audit_retention_days)
        audit_entries_deleted = await self.audit_log.purge_older_than(audit_cutoff)

        self.logger.info(
            "Cleanup removed %d reset tokens, %d recovery tokens and %d audit entries",
            tokens_deleted,
            recovery_tokens_deleted,
            audit_entries_deleted,
        )
        return Return.ok(
            CleanupExpiredTokensResponse(
                tokens_deleted=tokens_deleted,
                recovery_tokens_deleted=recovery_tokens_deleted,
                audit_entries_deleted=audit_entries_deleted,
            )
        )
