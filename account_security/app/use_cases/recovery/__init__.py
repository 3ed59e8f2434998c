"""
Recovery Use Cases

Password reset and account recovery token issuance, verification,
completion and maintenance.
"""

from .initiate_password_reset_use_case import InitiatePasswordResetUseCase
from .verify_reset_token_use_case import VerifyResetTokenUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .initiate_account_recovery_use_case import InitiateAccountRecoveryUseCase
from .verify_recovery_token_use_case import VerifyRecoveryTokenUseCase
from .complete_account_recovery_use_case import CompleteAccountRecoveryUseCase
from .cleanup_expired_tokens_use_case import CleanupExpiredTokensUseCase
from .dtos import (
    InitiatePasswordResetResponse,
    VerifyResetTokenResponse,
    ResetPasswordResponse,
    InitiateAccountRecoveryResponse,
    VerifyRecoveryTokenResponse,
    AccountRecoveryActions,
    CompleteAccountRecoveryResponse,
    CleanupExpiredTokensResponse,
)

__all__ = [
    # Use Cases
    "InitiatePasswordResetUseCase",
    "VerifyResetTokenUseCase",
    "ResetPasswordUseCase",
    "InitiateAccountRecoveryUseCase",
    "VerifyRecoveryTokenUseCase",
    "CompleteAccountRecoveryUseCase",
    "CleanupExpiredTokensUseCase",
    # DTOs - Requests
    "AccountRecoveryActions",
    # DTOs - Responses
    "InitiatePasswordResetResponse",
    "VerifyResetTokenResponse",
    "ResetPasswordResponse",
    "InitiateAccountRecoveryResponse",
    "VerifyRecoveryTokenResponse",
    "CompleteAccountRecoveryResponse",
    "CleanupExpiredTokensResponse",
]
