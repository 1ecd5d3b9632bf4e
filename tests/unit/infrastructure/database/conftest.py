"""Fixtures for database infrastructure unit tests."""

from collections.abc import Callable
from typing import Any, cast

import pytest
from pytest_mock import MockerFixture, MockType
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def mock_session(mocker: MockerFixture) -> MockType:
    """Mock AsyncSession whose ``execute`` result can be configured per test.

    Set ``mock_session.rows`` to the rows the next query returns and
    ``mock_session.rowcount`` for DELETE results.

    Returns:
        MockType: Mock session with add/flush/refresh/execute.
    """
    session = mocker.Mock(spec=AsyncSession)
    session.rows = []
    session.rowcount = 0
    session.flush = mocker.AsyncMock()
    session.refresh = mocker.AsyncMock()

    async def execute(stmt: Any) -> MockType:
        result = mocker.Mock()
        result.scalars.return_value.all.return_value = list(session.rows)
        result.scalar_one_or_none.return_value = session.rows[0] if session.rows else None
        result.rowcount = session.rowcount
        return result

    session.execute = mocker.AsyncMock(side_effect=execute)
    return cast("MockType", session)


@pytest.fixture
def executed_sql() -> Callable[[MockType], tuple[str, dict[str, Any]]]:
    """Compile the last statement a mock session executed.

    Returns:
        Callable: Maps the session to the PostgreSQL SQL text and its params.
    """

    def compile_last(session: MockType) -> tuple[str, dict[str, Any]]:
        stmt = session.execute.await_args.args[0]
        compiled = stmt.compile(dialect=postgresql.dialect())
        return " ".join(str(compiled).split()), dict(compiled.params)

    return compile_last
