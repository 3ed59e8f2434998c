"""
Use Cases

Organized into domain folders:
- recovery/: Password reset token lifecycle
- lockout/: Failed login tracking and account lockout

Import from subdirectories for better organization.
"""

from .recovery import (
    InitiatePasswordResetUseCase,
    VerifyResetTokenUseCase,
    ResetPasswordUseCase,
    CleanupExpiredTokensUseCase,
)
from .lockout import (
    HandleFailedLoginUseCase,
    CheckAccountLockoutUseCase,
    UnlockAccountUseCase,
    ResetFailedLoginAttemptsUseCase,
)

__all__ = [
    # Recovery
    "InitiatePasswordResetUseCase",
    "VerifyResetTokenUseCase",
    "ResetPasswordUseCase",
    "CleanupExpiredTokensUseCase",
    # Lockout
    "HandleFailedLoginUseCase",
    "CheckAccountLockoutUseCase",
    "UnlockAccountUseCase",
    "ResetFailedLoginAttemptsUseCase",
]
