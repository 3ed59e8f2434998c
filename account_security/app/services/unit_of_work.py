from abc import ABC, abstractmethod
from typing import AsyncContextManager

from account_security.app.repositories.account_lockout_history_repository import (
    IAccountLockoutHistoryRepository,
)
from account_security.app.repositories.account_recovery_token_repository import (
    IAccountRecoveryTokenRepository,
)
from account_security.app.repositories.password_reset_token_repository import (
    IPasswordResetTokenRepository,
)
from account_security.app.repositories.security_audit_log_repository import (
    ISecurityAuditLogRepository,
)
from account_security.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """
    Abstract UnitOfWork - defines repository access and transaction management.

    Each `async with uow:` block is one database transaction. Leaving the
    block without commit() rolls the transaction back.
    """

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    password_reset_tokens: IPasswordResetTokenRepository
    security_audit_log: ISecurityAuditLogRepository
    lockout_history: IAccountLockoutHistoryRepository
    account_recovery_tokens: IAccountRecoveryTokenRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    def savepoint(self) -> AsyncContextManager:
        """Nested transaction; failures inside it leave the outer transaction usable"""
        pass
