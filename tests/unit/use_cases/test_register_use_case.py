from unittest.mock import AsyncMock

import pytest

from src.app.repositories.account_repository import DuplicateEmailError
from src.app.services.audit_logger import AuditLogger
from src.app.services.token_issuer import TokenIssuer
from src.app.use_cases.auth import RegisterCommand, RegisterUseCase
from src.domain.entities import Industry
from tests.unit.factories import make_account, recorded_actions


@pytest.fixture
def use_case(mock_uow, password_hasher, codec, email_sender):
    return RegisterUseCase(
        mock_uow,
        password_hasher,
        TokenIssuer(mock_uow, codec),
        AuditLogger(mock_uow),
        email_sender,
    )


def command(**overrides) -> RegisterCommand:
    fields = dict(
        email="  Alice@Example.com ",
        password="Secret123",
        first_name="Alice",
        last_name="Smith",
        organization_name="Acme Fitness Co.",
        industry="fitness",
    )
    fields.update(overrides)
    return RegisterCommand(**fields)


@pytest.mark.asyncio
async def test_register_creates_account(use_case, mock_uow, password_hasher, email_sender):
    result = await use_case.execute(command())

    assert result.is_ok()
    account = mock_uow.accounts.create.call_args.args[0]
    assert account.email == "alice@example.com"
    assert account.password_hash == "$2b$12$hashed"
    assert account.organization_slug == "acme-fitness-co"
    assert account.organization_industry == Industry.fitness
    assert account.is_verified is False
    assert account.verification_token
    assert account.verification_expires_at is not None
    password_hasher.hash.assert_awaited_once_with("Secret123")

    response = result.value
    assert response.account.email == "alice@example.com"
    assert response.account.organization.slug == "acme-fitness-co"
    assert response.access_token and response.refresh_token
    assert recorded_actions(mock_uow) == ["register"]
    mock_uow.commit.assert_awaited_once()

    email_sender.send_welcome_email.assert_awaited_once()
    email_sender.send_verification_email.assert_awaited_once_with(
        account, account.verification_token
    )


@pytest.mark.asyncio
async def test_projection_hides_secrets(use_case):
    result = await use_case.execute(command())

    payload = result.value.account.model_dump(by_alias=True)
    assert "passwordHash" not in payload
    assert "verificationToken" not in payload
    assert payload["fullName"] == "Alice Smith"


@pytest.mark.asyncio
async def test_duplicate_email_any_case(use_case, mock_uow):
    mock_uow.accounts.get_by_email.return_value = make_account()

    result = await use_case.execute(command(email="ALICE@example.com"))

    assert result.error.code == "DUPLICATE_EMAIL"
    mock_uow.accounts.get_by_email.assert_awaited_once_with("alice@example.com")
    mock_uow.accounts.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_duplicate_detected_by_unique_constraint(use_case, mock_uow):
    mock_uow.accounts.create = AsyncMock(side_effect=DuplicateEmailError("alice@example.com"))

    result = await use_case.execute(command())

    assert result.error.code == "DUPLICATE_EMAIL"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"password": "short"},
        {"first_name": "   "},
        {"last_name": "x" * 51},
        {"organization_name": " "},
        {"industry": "mining"},
    ],
)
async def test_invalid_input(use_case, mock_uow, overrides):
    result = await use_case.execute(command(**overrides))

    assert result.error.code == "VALIDATION_ERROR"
    mock_uow.accounts.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_email_failure_does_not_fail_registration(use_case, email_sender):
    email_sender.send_welcome_email.side_effect = RuntimeError("smtp down")

    result = await use_case.execute(command())

    assert result.is_ok()
