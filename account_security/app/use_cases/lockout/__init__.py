"""
Account Lockout Use Cases

Failed login tracking, lockout status and administrative unlock.
"""

from .handle_failed_login_use_case import HandleFailedLoginUseCase
from .check_account_lockout_use_case import CheckAccountLockoutUseCase
from .unlock_account_use_case import UnlockAccountUseCase
from .reset_failed_login_attempts_use_case import ResetFailedLoginAttemptsUseCase
from .dtos import (
    FailedLoginResponse,
    AccountLockoutStatus,
    UnlockAccountResponse,
    ResetFailedLoginAttemptsResponse,
)

__all__ = [
    # Use Cases
    "HandleFailedLoginUseCase",
    "CheckAccountLockoutUseCase",
    "UnlockAccountUseCase",
    "ResetFailedLoginAttemptsUseCase",
    # DTOs - Responses
    "FailedLoginResponse",
    "AccountLockoutStatus",
    "UnlockAccountResponse",
    "ResetFailedLoginAttemptsResponse",
]
