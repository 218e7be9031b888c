"""
Unit tests for ForgotPasswordUseCase

Tests token issuance, delivery and the compensating cleanup on failure.
"""
from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.hashing import hash_reset_token
from src.app.use_cases.auth import ForgotPasswordUseCase
from src.domain.entities import User
from tests.utils.notifier import FakeNotifier


def build_url(token: str) -> str:
    return f"http://test/auth/reset-password/{token}"


@pytest.fixture
def user():
    return User(id=uuid4(), name="A", email="a@x.com", password_hash="$2b$hash")


@pytest.mark.asyncio
async def test_successful_forgot_password(mock_uow, clock, user):
    # Arrange
    mock_uow.users.get_by_email.return_value = user
    notifier = FakeNotifier()
    use_case = ForgotPasswordUseCase(mock_uow, notifier, clock)

    # Act
    result = await use_case.execute("a@x.com", build_url)

    # Assert
    assert result.is_ok()
    assert result.value.status == "success"

    assert len(notifier.sent) == 1
    message = notifier.sent[0]
    assert message.to == "a@x.com"
    assert "10 minutes" in message.subject

    raw_token = notifier.last_reset_token
    assert len(raw_token) >= 32
    assert user.password_reset_token_hash == hash_reset_token(raw_token)
    assert user.password_reset_token_hash != raw_token
    assert user.password_reset_expires_at == clock.now() + timedelta(minutes=10)

    mock_uow.users.save.assert_called_once_with(user, skip_validation=True)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_delivery_failure_clears_reset_token(mock_uow, clock, user):
    """A failed send must not leave a live, undelivered token behind"""
    mock_uow.users.get_by_email.return_value = user
    use_case = ForgotPasswordUseCase(mock_uow, FakeNotifier(fail=True), clock)

    result = await use_case.execute("a@x.com", build_url)

    assert result.is_err()
    assert result.error.code == "DELIVERY_ERROR"
    assert "SMTP" not in result.error.message

    assert user.password_reset_token_hash is None
    assert user.password_reset_expires_at is None
    assert mock_uow.users.save.call_count == 2
    mock_uow.users.save.assert_called_with(user, skip_validation=True)
    assert mock_uow.commit.call_count == 2


@pytest.mark.asyncio
async def test_unknown_email_is_reported_by_default(mock_uow, clock):
    mock_uow.users.get_by_email.return_value = None
    notifier = FakeNotifier()
    use_case = ForgotPasswordUseCase(mock_uow, notifier, clock)

    result = await use_case.execute("nobody@x.com", build_url)

    assert result.is_err()
    assert result.error.code == "EMAIL_NOT_FOUND"
    assert notifier.sent == []
    mock_uow.users.save.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_email_can_be_hidden(mock_uow, clock, user):
    """With enumeration hidden, unknown and known emails get the same reply"""
    notifier = FakeNotifier()
    use_case = ForgotPasswordUseCase(mock_uow, notifier, clock, reveal_unknown_email=False)

    mock_uow.users.get_by_email.return_value = None
    unknown = await use_case.execute("nobody@x.com", build_url)

    mock_uow.users.get_by_email.return_value = user
    known = await use_case.execute("a@x.com", build_url)

    assert unknown.is_ok() and known.is_ok()
    assert unknown.value == known.value
    assert len(notifier.sent) == 1


@pytest.mark.asyncio
async def test_missing_email(mock_uow, clock):
    use_case = ForgotPasswordUseCase(mock_uow, FakeNotifier(), clock)

    result = await use_case.execute(None, build_url)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.users.get_by_email.assert_not_called()
