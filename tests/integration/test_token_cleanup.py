"""
Integration tests for expired token and audit cleanup
"""

import pytest
from sqlalchemy import func
from sqlmodel import select

from account_security.domain.entities import PasswordResetToken, SecurityAuditLogEntry


async def count_rows(session_factory, entity):
    async with session_factory() as session:
        result = await session.exec(select(func.count()).select_from(entity))
        return result.one()


@pytest.mark.asyncio
async def test_cleanup_keeps_recently_expired_tokens(service, user, session_factory, clock):
    await service.initiate_password_reset("jane.doe@example.com")

    # Expired for 23 hours: still inside the retention period
    clock.advance(hours=24)
    assert await service.cleanup_expired_tokens() == 0
    assert await count_rows(session_factory, PasswordResetToken) == 1


@pytest.mark.asyncio
async def test_cleanup_deletes_tokens_expired_over_a_day(service, user, session_factory, clock):
    await service.initiate_password_reset("jane.doe@example.com")
    clock.advance(hours=25, minutes=1)
    await service.initiate_password_reset("jane.doe@example.com")

    deleted = await service.cleanup_expired_tokens()

    assert deleted == 1
    assert await count_rows(session_factory, PasswordResetToken) == 1


@pytest.mark.asyncio
async def test_cleanup_purges_audit_entries_past_retention(service, user, session_factory, clock):
    await service.handle_failed_login("jane.doe@example.com")
    clock.advance(days=91)
    await service.handle_failed_login("jane.doe@example.com")

    await service.cleanup_expired_tokens()

    assert await count_rows(session_factory, SecurityAuditLogEntry) == 1
