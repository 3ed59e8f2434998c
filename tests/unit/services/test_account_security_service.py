"""
Unit tests for AccountSecurityService error handling
"""
import logging
from uuid import uuid4

import pytest

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.account_security_service import AccountSecurityService


@pytest.fixture
def service(mock_uow, email_service, settings, clock):
    return AccountSecurityService(
        uow_factory=lambda: mock_uow,
        email_service=email_service,
        settings=settings,
        clock=clock,
    )


@pytest.mark.asyncio
async def test_unexpected_errors_become_transaction_failure(service, mock_uow, caplog):
    mock_uow.users.get_by_email.side_effect = RuntimeError("connection reset")
    caplog.set_level(logging.ERROR)

    result = await service.check_account_lockout("jane.doe@example.com")

    assert result.is_err()
    assert result.error.code == SecurityErrorCode.TRANSACTION_FAILURE
    # Internal details stay in the log
    assert result.error.message == "Operation failed"
    assert "connection reset" not in result.error.message
    assert "check_account_lockout" in caplog.text
    assert "connection reset" in caplog.text


@pytest.mark.asyncio
async def test_cleanup_returns_zero_on_failure(service, mock_uow):
    mock_uow.password_reset_tokens.delete_expired_before.side_effect = RuntimeError("locked")

    assert await service.cleanup_expired_tokens() == 0


@pytest.mark.asyncio
async def test_cleanup_returns_deleted_token_count(service, mock_uow):
    mock_uow.password_reset_tokens.delete_expired_before.return_value = 3

    assert await service.cleanup_expired_tokens() == 3


@pytest.mark.asyncio
async def test_cleanup_counts_reset_and_recovery_tokens(service, mock_uow):
    mock_uow.password_reset_tokens.delete_expired_before.return_value = 3
    mock_uow.account_recovery_tokens.delete_expired_before.return_value = 2

    assert await service.cleanup_expired_tokens() == 5


@pytest.mark.asyncio
async def test_unknown_recovery_type_is_rejected(service, mock_uow):
    result = await service.initiate_account_recovery("jane.doe@example.com", "emergency_access")

    assert result.is_err()
    assert result.error.code == SecurityErrorCode.INVALID_RECOVERY_REQUEST
    mock_uow.account_recovery_tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_unlock_unknown_user_is_not_found(service):
    result = await service.unlock_account(uuid4())

    assert result.is_err()
    assert result.error.code == SecurityErrorCode.NOT_FOUND


def test_policy_built_from_settings(service, settings):
    assert service.lockout_policy.max_failed_logins == settings.max_failed_logins
    assert service.password_policy.work_factor == 4
