"""
AccountLockoutHistory Entity

One row per lockout window started or escalated by failed logins.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class AccountLockoutHistory(SQLModel, table=True):
    """
    AccountLockoutHistory entity - forensic trail of account lockouts.

    Business Rules:
    - Written in the same transaction as the counters that caused the lockout
    - unlocked_at stays null until an explicit unlock closes the row
    - unlocked_by holds the administrator id for manual unlocks
    """

    __tablename__ = "account_lockout_history"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    lockout_reason: str = Field(max_length=100)  # LockoutReason value

    lockout_duration_minutes: int
    failed_attempts_count: int

    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None)

    auto_unlocked: bool = Field(default=False)
    unlocked_by: Optional[str] = Field(default=None, max_length=64)

    # Timestamps
    locked_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    unlocked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_lockout_history_locked_at", "locked_at"),)
