from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.token_service import TokenService
from tests.utils.clock import FrozenClock


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.create = AsyncMock()
    uow.users.get_by_email = AsyncMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.get_by_reset_token_hash = AsyncMock()
    uow.users.save = AsyncMock(side_effect=lambda user, **kwargs: user)
    return uow


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def token_service(clock):
    return TokenService(secret="unit-test-secret", expires_in=timedelta(days=90), clock=clock)
