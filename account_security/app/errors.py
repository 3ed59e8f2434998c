"""
Account Security Error Taxonomy

Error codes carried by Result errors, and the exceptions that
cross repository boundaries.
"""

from enum import Enum


class SecurityErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_RECOVERY_REQUEST = "INVALID_RECOVERY_REQUEST"
    EMAIL_IN_USE = "EMAIL_IN_USE"
    TRANSACTION_FAILURE = "TRANSACTION_FAILURE"
    # Absorbed by AuditLog, never returned to callers
    AUDIT_WRITE_FAILURE = "AUDIT_WRITE_FAILURE"


class ConcurrentUpdateError(Exception):
    """The user row changed between read and compare-and-set write"""

    def __init__(self, user_id, expected_version: int):
        self.user_id = user_id
        self.expected_version = expected_version
        super().__init__(
            f"User {user_id} was modified concurrently (expected version {expected_version})"
        )
