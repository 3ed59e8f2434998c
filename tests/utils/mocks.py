from typing import List
from unittest.mock import AsyncMock, MagicMock


def _passthrough(value, *args, **kwargs):
    return value


def build_mock_uow() -> MagicMock:
    """Mock UnitOfWork with every repository the account security use cases touch"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    savepoint = MagicMock()
    savepoint.__aenter__ = AsyncMock(return_value=None)
    savepoint.__aexit__ = AsyncMock(return_value=False)
    uow.savepoint = MagicMock(return_value=savepoint)

    # Mock repositories
    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_email_for_update = AsyncMock(return_value=None)
    uow.users.get_by_id_for_update = AsyncMock(return_value=None)
    uow.users.update_security_state = AsyncMock(side_effect=_passthrough)

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=_passthrough)
    uow.password_reset_tokens.get_active_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.count_created_since = AsyncMock(return_value=0)
    uow.password_reset_tokens.get_oldest_created_since = AsyncMock(return_value=None)
    uow.password_reset_tokens.mark_used = AsyncMock(return_value=True)
    uow.password_reset_tokens.invalidate_all_for_user = AsyncMock(return_value=0)
    uow.password_reset_tokens.delete_expired_before = AsyncMock(return_value=0)

    uow.account_recovery_tokens = MagicMock()
    uow.account_recovery_tokens.create = AsyncMock(side_effect=_passthrough)
    uow.account_recovery_tokens.get_active_by_token_hash = AsyncMock(return_value=None)
    uow.account_recovery_tokens.mark_used = AsyncMock(return_value=True)
    uow.account_recovery_tokens.delete_expired_before = AsyncMock(return_value=0)

    uow.security_audit_log = MagicMock()
    uow.security_audit_log.create = AsyncMock(side_effect=_passthrough)
    uow.security_audit_log.delete_created_before = AsyncMock(return_value=0)

    uow.lockout_history = MagicMock()
    uow.lockout_history.create = AsyncMock(side_effect=_passthrough)
    uow.lockout_history.close_open_for_user = AsyncMock(return_value=0)

    return uow


def recorded_audit_entries(uow: MagicMock) -> List:
    return [call.args[0] for call in uow.security_audit_log.create.call_args_list]


def recorded_actions(uow: MagicMock) -> List[str]:
    return [entry.action for entry in recorded_audit_entries(uow)]
