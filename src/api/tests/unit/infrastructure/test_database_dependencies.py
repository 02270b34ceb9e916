"""Unit tests for database dependency injection.

Tests the FastAPI dependency providers that hand out the app-scoped
control-plane sessionmaker, pool manager and database admin.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from infrastructure.database.dependencies import (
    get_control_plane_session,
    get_control_plane_sessionmaker,
    get_database_admin,
    get_tenant_pool_manager,
)


@pytest.fixture
def request_with_state():
    request = MagicMock()
    request.app.state.control_plane_sessionmaker = async_sessionmaker(
        create_async_engine("sqlite+aiosqlite:///:memory:"), expire_on_commit=False
    )
    request.app.state.pool_manager = MagicMock(name="pool_manager")
    request.app.state.database_admin = MagicMock(name="database_admin")
    return request


def test_dependencies_read_app_state(request_with_state):
    state = request_with_state.app.state

    assert get_control_plane_sessionmaker(request_with_state) is (
        state.control_plane_sessionmaker
    )
    assert get_tenant_pool_manager(request_with_state) is state.pool_manager
    assert get_database_admin(request_with_state) is state.database_admin


@pytest.mark.asyncio
async def test_control_plane_session_is_closed_after_use(request_with_state):
    generator = get_control_plane_session(request_with_state)

    session = await generator.__anext__()
    assert isinstance(session, AsyncSession)
    assert not session.in_transaction()

    with pytest.raises(StopAsyncIteration):
        await generator.__anext__()
