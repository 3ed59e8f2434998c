"""
Security Settings

Typed view over ApplicationConfig for the account security services.
"""

from datetime import timedelta

from pydantic import BaseModel, Field


class SecuritySettings(BaseModel):
    """Policy knobs for reset tokens, lockout and password hashing"""

    token_expiry_minutes: int = Field(default=60, gt=0)
    account_recovery_token_expiry_hours: int = Field(default=24, gt=0)
    max_reset_attempts: int = Field(default=5, gt=0)
    reset_attempt_window_minutes: int = Field(default=60, gt=0)
    max_failed_logins: int = Field(default=5, gt=0)
    account_lockout_minutes: int = Field(default=15, gt=0)
    progressive_lockout_multiplier: int = Field(default=2, ge=1)
    password_hash_work_factor: int = Field(default=12, ge=4, le=31)
    expired_token_retention_hours: int = Field(default=24, ge=0)
    audit_retention_days: int = Field(default=90, gt=0)
    concurrent_update_retries: int = Field(default=3, ge=0)
    frontend_url: str = "http://localhost:3000"

    @property
    def token_expiry(self) -> timedelta:
        return timedelta(minutes=self.token_expiry_minutes)

    @property
    def account_recovery_token_expiry(self) -> timedelta:
        return timedelta(hours=self.account_recovery_token_expiry_hours)

    @property
    def reset_attempt_window(self) -> timedelta:
        return timedelta(minutes=self.reset_attempt_window_minutes)

    @property
    def account_lockout_duration(self) -> timedelta:
        return timedelta(minutes=self.account_lockout_minutes)

    @classmethod
    def from_config(cls, config) -> "SecuritySettings":
        return cls(
            token_expiry_minutes=config.TOKEN_EXPIRY_MINUTES,
            account_recovery_token_expiry_hours=config.ACCOUNT_RECOVERY_TOKEN_EXPIRY_HOURS,
            max_reset_attempts=config.MAX_RESET_ATTEMPTS,
            reset_attempt_window_minutes=config.RESET_ATTEMPT_WINDOW_MINUTES,
            max_failed_logins=config.MAX_FAILED_LOGINS,
            account_lockout_minutes=config.ACCOUNT_LOCKOUT_MINUTES,
            progressive_lockout_multiplier=config.PROGRESSIVE_LOCKOUT_MULTIPLIER,
            password_hash_work_factor=config.PASSWORD_HASH_WORK_FACTOR,
            expired_token_retention_hours=config.EXPIRED_TOKEN_RETENTION_HOURS,
            audit_retention_days=config.AUDIT_RETENTION_DAYS,
            concurrent_update_retries=config.CONCURRENT_UPDATE_RETRIES,
            frontend_url=config.FRONTEND_URL,
        )
