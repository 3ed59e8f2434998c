"""
Initiate Account Recovery Use Case

Issues an account recovery token (email change or full account recovery)
and emails the recovery link.
"""

import logging
from typing import Optional, Union

from account_security.app.errors import SecurityErrorCode
from account_security.app.services.audit_log import AuditLog
from account_security.app.services.email_service import (
    ACCOUNT_RECOVERY_TEMPLATE,
    EMAIL_CHANGE_RECOVERY_TEMPLATE,
    IEmailService,
)
from account_security.app.services.recovery_token_store import RecoveryTokenStore
from account_security.app.services.settings import SecuritySettings
from account_security.app.services.unit_of_work import UnitOfWork
from account_security.domain.entities import (
    RecoveryType,
    SecurityAction,
    SecurityAuditLogEntry,
    User,
)
from account_security.libs.result import Error, Result, Return
from .dtos import InitiateAccountRecoveryResponse

GENERIC_RECOVERY_MESSAGE = (
    "If an account with this email exists, recovery instructions have been sent."
)

RECOVERY_EMAILS = {
    RecoveryType.email_change: (EMAIL_CHANGE_RECOVERY_TEMPLATE, "Confirm Your Email Change"),
    RecoveryType.account_recovery: (ACCOUNT_RECOVERY_TEMPLATE, "Recover Your Account"),
}


class InitiateAccountRecoveryUseCase:
    """
    Use case for requesting an account recovery link.

    Business Rules:
    - No email enumeration: unknown emails get the same success shape
      with email_sent=False
    - Token row commits before the email is sent; a failed send does not
      revoke the token
    - Audit entry written after commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_store: RecoveryTokenStore,
        audit_log: AuditLog,
        email_service: IEmailService,
        settings: SecuritySettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.uow = uow
        self.token_store = token_store
        self.audit_log = audit_log
        self.email_service = email_service
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    def _response(self, email_sent: bool) -> InitiateAccountRecoveryResponse:
        return InitiateAccountRecoveryResponse(
            success=True,
            message=GENERIC_RECOVERY_MESSAGE,
            email_sent=email_sent,
            expires_in=self.settings.account_recovery_token_expiry_hours * 60,
        )

    async def execute(
        self,
        email: str,
        recovery_type: Union[RecoveryType, str],
        recovery_data: Optional[dict] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[InitiateAccountRecoveryResponse]:
        """
        Execute initiate account recovery use case.

        Args:
            email: Address the user typed (any case)
            recovery_type: email_change or account_recovery
            recovery_data: Context stored with the token and shown on verify
            ip_address: Client IP address
            user_agent: Client user agent

        Returns:
            Result with InitiateAccountRecoveryResponse, or Error

        Errors:
            - INVALID_RECOVERY_REQUEST: Unknown recovery type
        """
        try:
            recovery_type = RecoveryType(recovery_type)
        except ValueError:
            return Return.err(
                Error(SecurityErrorCode.INVALID_RECOVERY_REQUEST, "Unknown recovery type")
            )

        async with self.uow:
            user = await self.uow.users.get_by_email(email.strip().lower())
            if user is None:
                return Return.ok(self._response(email_sent=False))

            issued = await self.token_store.issue_account_recovery(
                self.uow, user.id, recovery_type, recovery_data, ip_address, user_agent
            )
            await self.uow.commit()

        email_sent = await self._send_recovery_email(user, recovery_type, issued.token)

        await self.audit_log.record(
            SecurityAuditLogEntry(
                user_id=user.id,
                action=SecurityAction.account_recovery_requested.value,
                resource_type="user",
                resource_id=str(user.id),
                ip_address=ip_address,
                user_agent=user_agent,
                success=True,
                details={
                    "email": user.email,
                    "recovery_type": recovery_type.value,
                    "token_id": str(issued.record.id),
                    "token_expiry": issued.record.expires_at.isoformat(),
                    "email_sent": email_sent,
                },
            )
        )

        return Return.ok(self._response(email_sent=email_sent))

    async def _send_recovery_email(
        self, user: User, recovery_type: RecoveryType, token: str
    ) -> bool:
        template, subject = RECOVERY_EMAILS[recovery_type]
        recovery_url = (
            f"{self.settings.frontend_url}/account-recovery"
            f"?token={token}&type={recovery_type.value}"
        )
        try:
            await self.email_service.send_email(
                to=user.email,
                subject=subject,
                template=template,
                data={
                    "first_name": user.first_name,
                    "recovery_url": recovery_url,
                    "recovery_type": recovery_type.value,
                    "expiry_hours": self.settings.account_recovery_token_expiry_hours,
                },
            )
        except Exception:
            self.logger.exception("Failed to send account recovery email to user %s", user.id)
            return False
        return True
