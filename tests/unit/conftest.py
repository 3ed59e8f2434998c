from uuid import uuid4

import pytest

from account_security.app.services.audit_log import AuditLog
from account_security.app.services.lockout_policy import LockoutPolicyEngine
from account_security.app.services.password_policy import PasswordPolicy
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.token_generator import TokenGenerator
from account_security.domain.entities import User
from tests.utils.clock import FrozenClock
from tests.utils.email import RecordingEmailService
from tests.utils.mocks import build_mock_uow


@pytest.fixture
def mock_uow():
    return build_mock_uow()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def settings():
    # Lowest bcrypt cost keeps hashing fast in tests
    return SecuritySettings(password_hash_work_factor=4, frontend_url="https://app.example.com")


@pytest.fixture
def email_service():
    return RecordingEmailService()


@pytest.fixture
def audit_uow():
    """Separate unit of work for entries the audit log writes on its own"""
    return build_mock_uow()


@pytest.fixture
def audit_log(audit_uow, clock):
    return AuditLog(lambda: audit_uow, clock)


@pytest.fixture
def token_store(clock, settings):
    return RecoveryTokenStore(TokenGenerator(), clock, settings)


@pytest.fixture
def lockout_policy(settings):
    return LockoutPolicyEngine(
        max_failed_logins=settings.max_failed_logins,
        base_lockout_duration=settings.account_lockout_duration,
        progressive_multiplier=settings.progressive_lockout_multiplier,
    )


@pytest.fixture
def password_policy(settings):
    return PasswordPolicy(settings.password_hash_work_factor)


@pytest.fixture
def user():
    return User(
        id=uuid4(),
        email="jane.doe@example.com",
        first_name="Jane",
        password_hash="$2b$04$abcdefghijklmnopqrstuuMmS0b6Cq3I8B4y7u0Pa3Dd7kKQGx8yWe",
        failed_login_attempts=0,
        security_version=3,
    )
