"""
User Entity

Security columns of an application user account.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class User(SQLModel, table=True):
    """
    User entity - the account whose credentials and lockout state we guard.

    Business Rules:
    - Email must be unique across all users, matched case-insensitively
    - Password stored as bcrypt hash (cost factor 12)
    - failed_login_attempts never goes negative
    - account_locked_until is null or in the future when written
    - security_version is bumped on every write of the security columns
    - Never deleted by this service
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    # Lockout state
    failed_login_attempts: int = Field(default=0, ge=0)
    account_locked_until: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    last_failed_login: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    security_version: int = Field(default=0)

    # Timestamps
    last_password_reset: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    last_successful_login: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_account_locked_until", "account_locked_until"),)
