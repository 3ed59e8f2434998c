"""
Account Lockout Use Case DTOs (Data Transfer Objects)

Response classes for failed login tracking and lockout administration.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class FailedLoginResponse(BaseModel):
    """Response for handle failed login use case"""

    account_locked: bool
    failed_attempts: int
    lockout_until: Optional[datetime] = None
    remaining_attempts: int


class AccountLockoutStatus(BaseModel):
    """Response for check account lockout use case"""

    locked: bool
    exists: bool
    locked_until: Optional[datetime] = None
    remaining_time: Optional[int] = None  # whole minutes, rounded up
    failed_attempts: int = 0


class UnlockAccountResponse(BaseModel):
    """Response for unlock account use case"""

    success: bool
    message: str
    email: str


class ResetFailedLoginAttemptsResponse(BaseModel):
    """Response for reset failed login attempts use case"""

    success: bool
