from typing import AsyncContextManager

from sqlalchemy.orm import sessionmaker

from account_security.adapter.repositories.account_lockout_history_repository import (
    AccountLockoutHistoryRepository,
)
from account_security.adapter.repositories.account_recovery_token_repository import (
    AccountRecoveryTokenRepository,
)
from account_security.adapter.repositories.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from account_security.adapter.repositories.security_audit_log_repository import (
    SecurityAuditLogRepository,
)
from account_security.adapter.repositories.user_repository import UserRepository
from account_security.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    SQLAlchemy implementation of UnitOfWork pattern.

    Opens a new session on every `async with` so one instance can run
    several transactions in sequence.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self.session = None

    async def __aenter__(self):
        self.session = self.session_factory()

        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        self.security_audit_log = SecurityAuditLogRepository(self.session)
        self.lockout_history = AccountLockoutHistoryRepository(self.session)
        self.account_recovery_tokens = AccountRecoveryTokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        try:
            await self.rollback()
        finally:
            await self.session.close()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

    def savepoint(self) -> AsyncContextManager:
        return self.session.begin_nested()
