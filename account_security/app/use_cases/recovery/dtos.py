"""
Password Recovery Use Case DTOs (Data Transfer Objects)

Request and response classes for the password reset and account recovery flows.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from account_security.domain.entities import RecoveryType


class InitiatePasswordResetResponse(BaseModel):
    """
    Response for initiate password reset use case.

    Same shape whether or not the email belongs to an account.
    """

    success: bool
    message: str
    email_sent: bool
    expires_in: int  # minutes


class VerifyResetTokenResponse(BaseModel):
    """Response for verify reset token use case"""

    valid: bool
    user_id: UUID
    email: str
    first_name: Optional[str] = None
    expires_at: datetime


class ResetPasswordResponse(BaseModel):
    """Response for reset password use case"""

    success: bool
    message: str
    user_id: UUID


class CleanupExpiredTokensResponse(BaseModel):
    """Response for cleanup expired tokens use case"""

    tokens_deleted: int
    recovery_tokens_deleted: int = 0
    audit_entries_deleted: int


class InitiateAccountRecoveryResponse(BaseModel):
    """
    Response for initiate account recovery use case.

    Same shape whether or not the email belongs to an account.
    """

    success: bool
    message: str
    email_sent: bool
    expires_in: int  # minutes


class VerifyRecoveryTokenResponse(BaseModel):
    """Response for verify recovery token use case"""

    valid: bool
    user_id: UUID
    email: str
    first_name: Optional[str] = None
    recovery_type: RecoveryType
    recovery_data: Dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime


class AccountRecoveryActions(BaseModel):
    """
    Changes requested when completing an account recovery.

    new_email is required for email_change, new_password for account_recovery.
    """

    new_email: Optional[str] = None
    new_password: Optional[str] = None


class CompleteAccountRecoveryResponse(BaseModel):
    """Response for complete account recovery use case"""

    success: bool
    message: str
    user_id: UUID
    recovery_type: RecoveryType
    old_email: Optional[str] = None
    new_email: Optional[str] = None
    password_reset: bool = False
