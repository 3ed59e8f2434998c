"""
Account Security Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import LockoutReason, RecoveryType, SecurityAction

# Export all entities
from .user import User
from .password_reset_token import PasswordResetToken
from .security_audit_log_entry import SecurityAuditLogEntry
from .account_lockout_history import AccountLockoutHistory
from .account_recovery_token import AccountRecoveryToken

__all__ = [
    # Enums
    "SecurityAction",
    "LockoutReason",
    "RecoveryType",
    # Entities
    "User",
    "PasswordResetToken",
    "SecurityAuditLogEntry",
    "AccountLockoutHistory",
    "AccountRecoveryToken",
]
