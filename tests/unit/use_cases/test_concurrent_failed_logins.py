"""
Concurrency tests for failed login counting

Runs many handle_failed_login calls for one user at the same time
against an in-memory store and checks that no increment is lost.
"""
import asyncio
from datetime import timedelta

import pytest

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.account_security_service import AccountSecurityService
from account_security.domain.entities import SecurityAction
from tests.utils.in_memory_uow import InMemoryDatabase, InMemoryUnitOfWork


def build_service(db, email_service, settings, clock):
    return AccountSecurityService(
        uow_factory=lambda: InMemoryUnitOfWork(db),
        email_service=email_service,
        settings=settings,
        clock=clock,
    )


async def fail_concurrently(service, count):
    return await asyncio.gather(
        *[service.handle_failed_login("jane.doe@example.com") for _ in range(count)]
    )


@pytest.mark.asyncio
async def test_row_lock_serializes_concurrent_failures(user, email_service, settings, clock):
    # Arrange
    db = InMemoryDatabase(row_locking=True)
    db.add_user(user)
    service = build_service(db, email_service, settings, clock)

    # Act
    results = await fail_concurrently(service, 10)

    # Assert
    assert all(result.is_ok() for result in results)
    assert sorted(result.value.failed_attempts for result in results) == list(range(1, 11))

    stored = db.load_user(user.id)
    assert stored.failed_login_attempts == 10
    assert stored.account_locked_until == clock.now() + timedelta(minutes=30)
    assert stored.security_version == user.security_version + 10
    assert db.conflicts == 0

    assert len(db.lockout_history) == 2
    actions = [entry.action for entry in db.audit_entries]
    assert actions.count(SecurityAction.failed_login_attempt.value) == 10
    assert actions.count(SecurityAction.account_locked.value) == 2


@pytest.mark.asyncio
async def test_version_check_retries_lost_races(user, email_service, settings, clock):
    """Without row locks every lost compare-and-set is retried until it lands"""
    # Arrange
    db = InMemoryDatabase(row_locking=False)
    db.add_user(user)
    service = build_service(
        db, email_service, settings.model_copy(update={"concurrent_update_retries": 10}), clock
    )

    # Act
    results = await fail_concurrently(service, 10)

    # Assert
    assert all(result.is_ok() for result in results)
    assert sorted(result.value.failed_attempts for result in results) == list(range(1, 11))
    assert db.load_user(user.id).failed_login_attempts == 10
    assert db.conflicts > 0


@pytest.mark.asyncio
async def test_exhausted_retries_fail_without_losing_counts(user, email_service, settings, clock):
    # Arrange
    db = InMemoryDatabase(row_locking=False)
    db.add_user(user)
    service = build_service(
        db, email_service, settings.model_copy(update={"concurrent_update_retries": 0}), clock
    )

    # Act
    results = await fail_concurrently(service, 3)

    # Assert
    succeeded = [result for result in results if result.is_ok()]
    failed = [result for result in results if result.is_err()]
    assert failed
    assert all(result.error.code == SecurityErrorCode.TRANSACTION_FAILURE for result in failed)
    # Every reported failure was persisted, nothing more
    assert db.load_user(user.id).failed_login_attempts == len(succeeded)
