"""
SecurityAuditLogEntry Entity

Append-only log of security-relevant account events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel


class SecurityAuditLogEntry(SQLModel, table=True):
    """
    SecurityAuditLogEntry entity - immutable record of a security event.

    Business Rules:
    - Append-only (never updated; purged after the retention period)
    - user_id nullable for events not tied to a known account
    - details stores event-specific context (email, attempt counts, reason)
    - Write failures never fail the operation being audited
    """

    __tablename__ = "security_audit_log"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None, index=True)
    action: str = Field(max_length=100)  # SecurityAction value

    resource_type: Optional[str] = Field(default=None, max_length=50)
    resource_id: Optional[str] = Field(default=None, max_length=64)

    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None)

    success: bool = Field(default=True)
    details: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_security_audit_created_at", "created_at"),
        Index("idx_security_audit_user_action", "user_id", "action"),
        Index("idx_security_audit_success", "success"),
    )
