from typing import Optional

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from account_security.adapter.services.email_service import LoggingEmailService
from account_security.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from account_security.app.services.account_security_service import AccountSecurityService
from account_security.app.services.email_service import IEmailService
from account_security.app.services.settings import SecuritySettings

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


def get_unit_of_work() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(AsyncSessionLocal)


def get_account_security_service(
    email_service: Optional[IEmailService] = None,
) -> AccountSecurityService:
    """
    Build the service against the configured database.

    Callers with a real mail transport pass their own IEmailService.
    """
    return AccountSecurityService(
        uow_factory=get_unit_of_work,
        email_service=email_service or LoggingEmailService(),
        settings=SecuritySettings.from_config(ApplicationConfig),
    )
