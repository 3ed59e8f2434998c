import asyncio
import logging

from config import ApplicationConfig
from account_security.depends import engine, get_account_security_service

logger = logging.getLogger("account_security.cleanup")


async def run_cleanup() -> int:
    service = get_account_security_service()
    try:
        return await service.cleanup_expired_tokens()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL.upper())
    deleted = asyncio.run(run_cleanup())
    logger.info("Removed %d expired recovery tokens", deleted)
