"""
AccountRecoveryToken Entity

Tokens for recovery flows other than a plain password reset.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel


class AccountRecoveryToken(SQLModel, table=True):
    """
    AccountRecoveryToken entity - single-use link for an account recovery.

    Business Rules:
    - Expires after 24 hours
    - Token is SHA-256 hash of secure random string
    - recovery_type decides what completing the recovery changes
    - recovery_data holds request context shown back when the link is verified
    - Expired rows are deleted by cleanup after 24 hours
    """

    __tablename__ = "account_recovery_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, max_length=64)  # SHA-256 output
    recovery_type: str = Field(max_length=50)  # RecoveryType value
    recovery_data: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    used: bool = Field(default=False)
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Request context
    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(
        default_factory=datetime.utcnow, sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_account_recovery_expires_at", "expires_at"),
        Index("idx_account_recovery_type", "recovery_type"),
    )
