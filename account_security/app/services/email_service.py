from abc import ABC, abstractmethod
from typing import Any, Dict

PASSWORD_RESET_TEMPLATE = "password-reset"
PASSWORD_RESET_CONFIRMATION_TEMPLATE = "password-reset-confirmation"
EMAIL_CHANGE_RECOVERY_TEMPLATE = "email-change-recovery"
ACCOUNT_RECOVERY_TEMPLATE = "account-recovery"


class IEmailService(ABC):
    """Outbound email collaborator - rendering and transport live outside this service"""

    @abstractmethod
    async def send_email(
        self, to: str, subject: str, template: str, data: Dict[str, Any]
    ) -> None:
        pass
