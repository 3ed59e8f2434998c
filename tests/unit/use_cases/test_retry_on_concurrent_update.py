import logging
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from account_security.app.errors import ConcurrentUpdateError
from account_security.app.use_cases.concurrency import retry_on_concurrent_update

logger = logging.getLogger(__name__)


@pytest.mark.asyncio
async def test_returns_first_successful_result():
    operation = AsyncMock(return_value="done")

    assert await retry_on_concurrent_update(operation, 3, logger) == "done"
    operation.assert_called_once()


@pytest.mark.asyncio
async def test_retries_lost_races(caplog):
    user_id = uuid4()
    operation = AsyncMock(
        side_effect=[ConcurrentUpdateError(user_id, 1), ConcurrentUpdateError(user_id, 2), "done"]
    )
    caplog.set_level(logging.WARNING)

    assert await retry_on_concurrent_update(operation, 3, logger) == "done"
    assert operation.call_count == 3
    assert "retrying (2/3)" in caplog.text


@pytest.mark.asyncio
async def test_raises_when_retries_exhausted():
    operation = AsyncMock(side_effect=ConcurrentUpdateError(uuid4(), 1))

    with pytest.raises(ConcurrentUpdateError):
        await retry_on_concurrent_update(operation, 1, logger)

    assert operation.call_count == 2


@pytest.mark.asyncio
async def test_other_errors_are_not_retried():
    operation = AsyncMock(side_effect=ValueError("bad input"))

    with pytest.raises(ValueError):
        await retry_on_concurrent_update(operation, 3, logger)

    operation.assert_called_once()
