"""
Unit tests for ResetFailedLoginAttemptsUseCase
"""
from datetime import timedelta
from uuid import uuid4

import pytest

from account_security.app.errors import SecurityErrorCode
from account_security.app.use_cases.lockout import ResetFailedLoginAttemptsUseCase


@pytest.mark.asyncio
async def test_successful_login_clears_counters(mock_uow, user, clock, settings):
    # Arrange
    user.failed_login_attempts = 3
    user.account_locked_until = clock.now() - timedelta(minutes=2)
    mock_uow.users.get_by_id_for_update.return_value = user
    use_case = ResetFailedLoginAttemptsUseCase(mock_uow, clock, settings)

    # Act
    result = await use_case.execute(user.id)

    # Assert
    assert result.is_ok()
    assert result.value.success is True
    assert user.failed_login_attempts == 0
    assert user.account_locked_until is None
    assert user.last_successful_login == clock.now()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_user(mock_uow, clock, settings):
    use_case = ResetFailedLoginAttemptsUseCase(mock_uow, clock, settings)

    result = await use_case.execute(uuid4())

    assert result.is_err()
    assert result.error.code == SecurityErrorCode.NOT_FOUND
