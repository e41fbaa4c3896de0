# This project was developed with assistance from AI tools.
"""DatabaseService tests against a mocked engine (no PostgreSQL needed)."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from db.database import DatabaseService


def _engine(connect_error: Exception | None = None) -> MagicMock:
    conn = AsyncMock()
    ctx = MagicMock()
    if connect_error is not None:
        ctx.__aenter__ = AsyncMock(side_effect=connect_error)
    else:
        ctx.__aenter__ = AsyncMock(return_value=conn)
    ctx.__aexit__ = AsyncMock(return_value=False)
    engine = MagicMock()
    engine.connect.return_value = ctx
    engine.dispose = AsyncMock()
    return engine


@pytest.mark.asyncio
async def test_health_check_runs_trivial_query():
    engine = _engine()
    assert await DatabaseService(engine).health_check() is True
    engine.connect.assert_called_once()


@pytest.mark.asyncio
async def test_health_check_reports_unreachable_database():
    engine = _engine(OperationalError("SELECT 1", {}, Exception("connection refused")))
    assert await DatabaseService(engine).health_check() is False


@pytest.mark.asyncio
async def test_close_disposes_engine():
    engine = _engine()
    await DatabaseService(engine).close()
    engine.dispose.assert_awaited_once()
