"""
Account Security Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class SecurityAction(str, Enum):
    """Action recorded in the security audit log"""

    password_reset_requested = "password_reset_requested"
    password_reset_completed = "password_reset_completed"
    password_reset_failed = "password_reset_failed"
    failed_login_attempt = "failed_login_attempt"
    account_locked = "account_locked"
    account_unlocked = "account_unlocked"
    account_recovery_requested = "account_recovery_requested"
    account_recovery_completed = "account_recovery_completed"
    account_recovery_failed = "account_recovery_failed"


class RecoveryType(str, Enum):
    """What completing an account recovery changes"""

    email_change = "email_change"
    account_recovery = "account_recovery"


class LockoutReason(str, Enum):
    """Why an account lockout was started"""

    failed_logins = "failed_logins"
    progressive_escalation = "progressive_escalation"
