"""
Unit tests for CleanupExpiredTokensUseCase
"""
from datetime import timedelta

import pytest

from account_security.app.use_cases.recovery import CleanupExpiredTokensUseCase


@pytest.mark.asyncio
async def test_cleanup_purges_tokens_and_old_audit_entries(
    mock_uow, audit_uow, token_store, audit_log, clock, settings
):
    # Arrange
    mock_uow.password_reset_tokens.delete_expired_before.return_value = 4
    mock_uow.account_recovery_tokens.delete_expired_before.return_value = 2
    audit_uow.security_audit_log.delete_created_before.return_value = 9
    use_case = CleanupExpiredTokensUseCase(mock_uow, token_store, audit_log, clock, settings)

    # Act
    result = await use_case.execute()

    # Assert
    assert result.is_ok()
    assert result.value.tokens_deleted == 4
    assert result.value.recovery_tokens_deleted == 2
    assert result.value.audit_entries_deleted == 9
    mock_uow.password_reset_tokens.delete_expired_before.assert_called_once_with(
        clock.now() - timedelta(hours=24)
    )
    mock_uow.account_recovery_tokens.delete_expired_before.assert_called_once_with(
        clock.now() - timedelta(hours=24)
    )
    audit_uow.security_audit_log.delete_created_before.assert_called_once_with(
        clock.now() - timedelta(days=90)
    )
