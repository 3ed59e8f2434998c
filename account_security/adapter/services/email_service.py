import logging
from typing import Any, Dict

from account_security.app.services.email_service import IEmailService

logger = logging.getLogger(__name__)


class LoggingEmailService(IEmailService):
    """
    Email collaborator that only logs the outgoing message.

    Used when no delivery transport is wired in (development, cleanup jobs).
    Template data is not logged because it carries reset links.
    """

    async def send_email(
        self, to: str, subject: str, template: str, data: Dict[str, Any]
    ) -> None:
        logger.info("Email %s queued for %s: %s", template, to, subject)
