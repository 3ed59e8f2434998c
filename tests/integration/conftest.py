import bcrypt
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from account_security.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from account_security.app.services.account_security_service import AccountSecurityService
from account_security.app.services.settings import SecuritySettings
from account_security.domain.entities import User
from tests.utils.clock import FrozenClock
from tests.utils.email import RecordingEmailService


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'account_security.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def settings():
    return SecuritySettings(password_hash_work_factor=4, frontend_url="https://app.example.com")


@pytest.fixture
def service(session_factory, email_service, settings, clock):
    return AccountSecurityService(
        uow_factory=lambda: SqlAlchemyUnitOfWork(session_factory),
        email_service=email_service,
        settings=settings,
        clock=clock,
    )


@pytest_asyncio.fixture
async def user(db_session):
    user = User(
        email="jane.doe@example.com",
        first_name="Jane",
        password_hash=bcrypt.hashpw(b"OldPass123", bcrypt.gensalt(4)).decode(),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def uow(session_factory):
    """Unit of work for reading back what the service persisted"""
    return SqlAlchemyUnitOfWork(session_factory)
