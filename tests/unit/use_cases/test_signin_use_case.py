"""
Unit tests for SigninUseCase
"""
from unittest.mock import patch
from uuid import uuid4

import pytest

from src.app.services.hashing import hash_password
from src.app.use_cases.auth import SigninUseCase
from src.domain.entities import User


@pytest.fixture
def existing_user():
    return User(
        id=uuid4(),
        name="A",
        email="a@x.com",
        password_hash=hash_password("secret123", rounds=4),
    )


@pytest.mark.asyncio
async def test_successful_signin(mock_uow, token_service, existing_user):
    mock_uow.users.get_by_email.return_value = existing_user
    use_case = SigninUseCase(mock_uow, token_service)

    result = await use_case.execute("a@x.com", "secret123")

    assert result.is_ok()
    assert result.value.user.id == existing_user.id
    assert token_service.verify_and_decode(result.value.token).value.subject_id == existing_user.id
    mock_uow.users.get_by_email.assert_called_once_with("a@x.com", include_password_hash=True)


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_fail_identically(
    mock_uow, token_service, existing_user
):
    use_case = SigninUseCase(mock_uow, token_service)

    mock_uow.users.get_by_email.return_value = existing_user
    wrong_password = await use_case.execute("a@x.com", "wrong-password")

    mock_uow.users.get_by_email.return_value = None
    unknown_email = await use_case.execute("nobody@x.com", "secret123")

    assert wrong_password.is_err() and unknown_email.is_err()
    assert wrong_password.error == unknown_email.error
    assert wrong_password.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
@pytest.mark.parametrize("email,password", [(None, "secret123"), ("a@x.com", None), ("", "")])
async def test_missing_fields_short_circuit(mock_uow, token_service, email, password):
    """Nothing past the validation check runs when a field is missing"""
    use_case = SigninUseCase(mock_uow, token_service)

    result = await use_case.execute(email, password)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.__aenter__.assert_not_called()
    mock_uow.users.get_by_email.assert_not_called()


@pytest.mark.asyncio
async def test_overlong_password_is_invalid_credentials(mock_uow, token_service, existing_user):
    """Passwords bcrypt cannot take fail like any wrong password"""
    use_case = SigninUseCase(mock_uow, token_service, bcrypt_rounds=4)
    long_password = "y" * 100

    mock_uow.users.get_by_email.return_value = existing_user
    known_email = await use_case.execute("a@x.com", long_password)

    mock_uow.users.get_by_email.return_value = None
    unknown_email = await use_case.execute("nobody@x.com", long_password)

    assert known_email.is_err() and unknown_email.is_err()
    assert known_email.error == unknown_email.error
    assert known_email.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_unknown_email_burns_a_check_at_configured_cost(mock_uow, token_service):
    mock_uow.users.get_by_email.return_value = None
    use_case = SigninUseCase(mock_uow, token_service, bcrypt_rounds=4)

    with patch("src.app.use_cases.auth.signin_use_case.burn_password_check") as burn:
        await use_case.execute("nobody@x.com", "secret123")

    burn.assert_called_once_with("secret123", 4)
