"""
Integration tests for the account recovery flow

Runs AccountSecurityService against SQLite through the real repositories.
"""
from datetime import timedelta

import bcrypt
import pytest
from sqlalchemy import func
from sqlmodel import select

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.email_service import (
    ACCOUNT_RECOVERY_TEMPLATE,
    EMAIL_CHANGE_RECOVERY_TEMPLATE,
)
from account_security.domain.entities import AccountRecoveryToken, SecurityAction, User

NEW_PASSWORD = "RecoveredPass123"


def token_from_email(email_service, template):
    recovery_url = email_service.last(template)["data"]["recovery_url"]
    return recovery_url.split("token=")[1].split("&")[0]


async def request_recovery(service, email_service, recovery_type, template):
    result = await service.initiate_account_recovery(
        "jane.doe@example.com", recovery_type, {"reason": "lost access"}, "203.0.113.7"
    )
    assert result.is_ok()
    assert result.value.email_sent is True
    return token_from_email(email_service, template)


@pytest.mark.asyncio
async def test_full_email_change_recovery(service, email_service, user, uow, clock):
    # Request
    token = await request_recovery(
        service, email_service, "email_change", EMAIL_CHANGE_RECOVERY_TEMPLATE
    )

    # Verify
    verification = await service.verify_recovery_token(token)
    assert verification.is_ok()
    assert verification.value.user_id == user.id
    assert verification.value.recovery_type.value == "email_change"
    assert verification.value.recovery_data == {"reason": "lost access"}
    assert verification.value.expires_at == clock.now() + timedelta(hours=24)

    # Complete
    clock.advance(minutes=10)
    result = await service.complete_account_recovery(token, new_email="Jane@New.Example.com")
    assert result.is_ok()
    assert result.value.old_email == "jane.doe@example.com"
    assert result.value.new_email == "jane@new.example.com"

    async with uow:
        stored = await uow.users.get_by_id(user.id)
        audit = await uow.security_audit_log.get_by_user(user.id)
        assert stored.email == "jane@new.example.com"
        assert stored.security_version == user.security_version + 1
        assert [entry.action for entry in audit] == [
            SecurityAction.account_recovery_completed.value,
            SecurityAction.account_recovery_requested.value,
        ]

    status = await service.check_account_lockout("jane@new.example.com")
    assert status.value.exists is True


@pytest.mark.asyncio
async def test_recovery_token_is_single_use(service, email_service, user):
    token = await request_recovery(
        service, email_service, "email_change", EMAIL_CHANGE_RECOVERY_TEMPLATE
    )
    first = await service.complete_account_recovery(token, new_email="jane@new.example.com")
    assert first.is_ok()

    verification = await service.verify_recovery_token(token)
    second = await service.complete_account_recovery(token, new_email="other@example.com")

    assert verification.error.code == SecurityErrorCode.INVALID_OR_EXPIRED_TOKEN
    assert second.error.code == SecurityErrorCode.INVALID_OR_EXPIRED_TOKEN


@pytest.mark.asyncio
async def test_email_change_to_taken_address(service, email_service, user, db_session, uow):
    db_session.add(User(email="taken@example.com", password_hash="x" * 60))
    await db_session.commit()
    token = await request_recovery(
        service, email_service, "email_change", EMAIL_CHANGE_RECOVERY_TEMPLATE
    )

    result = await service.complete_account_recovery(token, new_email="taken@example.com")

    assert result.error.code == SecurityErrorCode.EMAIL_IN_USE
    assert (await service.verify_recovery_token(token)).is_ok()
    async with uow:
        stored = await uow.users.get_by_id(user.id)
        assert stored.email == "jane.doe@example.com"


@pytest.mark.asyncio
async def test_account_recovery_unlocks_and_resets_password(service, email_service, user, uow):
    for _ in range(5):
        await service.handle_failed_login("jane.doe@example.com")
    token = await request_recovery(
        service, email_service, "account_recovery", ACCOUNT_RECOVERY_TEMPLATE
    )

    result = await service.complete_account_recovery(token, new_password=NEW_PASSWORD)

    assert result.is_ok()
    assert result.value.password_reset is True
    status = await service.check_account_lockout("jane.doe@example.com")
    assert status.value.locked is False
    assert status.value.failed_attempts == 0

    async with uow:
        stored = await uow.users.get_by_id(user.id)
        assert bcrypt.checkpw(NEW_PASSWORD.encode(), stored.password_hash.encode())


@pytest.mark.asyncio
async def test_account_recovery_revokes_open_reset_links(service, email_service, user):
    await service.initiate_password_reset("jane.doe@example.com")
    reset_url = email_service.last("password-reset")["data"]["reset_url"]
    reset_token = reset_url.split("token=")[1]
    token = await request_recovery(
        service, email_service, "account_recovery", ACCOUNT_RECOVERY_TEMPLATE
    )

    assert (await service.complete_account_recovery(token, new_password=NEW_PASSWORD)).is_ok()

    verification = await service.verify_reset_token(reset_token)
    assert verification.error.code == SecurityErrorCode.INVALID_OR_EXPIRED_TOKEN


@pytest.mark.asyncio
async def test_expired_recovery_token(service, email_service, user, clock):
    token = await request_recovery(
        service, email_service, "account_recovery", ACCOUNT_RECOVERY_TEMPLATE
    )

    clock.advance(hours=24, seconds=1)
    result = await service.complete_account_recovery(token, new_password=NEW_PASSWORD)

    assert result.error.code == SecurityErrorCode.INVALID_OR_EXPIRED_TOKEN


@pytest.mark.asyncio
async def test_cleanup_removes_stale_recovery_tokens(
    service, email_service, user, session_factory, clock
):
    await request_recovery(
        service, email_service, "email_change", EMAIL_CHANGE_RECOVERY_TEMPLATE
    )
    clock.advance(hours=48, minutes=1)

    deleted = await service.cleanup_expired_tokens()

    assert deleted == 1
    async with session_factory() as session:
        result = await session.exec(select(func.count()).select_from(AccountRecoveryToken))
        assert result.one() == 0
