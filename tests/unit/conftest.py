from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.api.utils.jwt import AccessTokenCodec

TEST_SECRET = "unit-test-secret"


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.accounts = MagicMock()
    uow.accounts.get_by_id = AsyncMock(return_value=None)
    uow.accounts.get_by_public_id = AsyncMock(return_value=None)
    uow.accounts.get_by_email = AsyncMock(return_value=None)
    uow.accounts.get_by_provider_identity = AsyncMock(return_value=None)
    uow.accounts.get_by_verification_token = AsyncMock(return_value=None)
    uow.accounts.get_by_reset_token_hash = AsyncMock(return_value=None)
    uow.accounts.create = AsyncMock(side_effect=lambda account: account)
    uow.accounts.update = AsyncMock(side_effect=lambda account: account)
    uow.accounts.record_failed_login = AsyncMock()
    uow.accounts.record_successful_login = AsyncMock()

    uow.provider_links = MagicMock()
    uow.provider_links.get_by_account_id = AsyncMock(return_value=[])
    uow.provider_links.create = AsyncMock(side_effect=lambda link: link)

    uow.refresh_tokens = MagicMock()
    uow.refresh_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.refresh_tokens.find_active_by_hash = AsyncMock(return_value=None)
    uow.refresh_tokens.claim = AsyncMock(return_value=True)
    uow.refresh_tokens.delete_by_hash = AsyncMock(return_value=True)
    uow.refresh_tokens.delete_expired = AsyncMock(return_value=0)
    uow.refresh_tokens.delete_oldest_beyond = AsyncMock(return_value=0)
    uow.refresh_tokens.delete_all_by_account_id = AsyncMock(return_value=0)

    uow.security_events = MagicMock()
    uow.security_events.create = AsyncMock(side_effect=lambda event: event)
    uow.security_events.get_paginated = AsyncMock(return_value=([], None))
    return uow


@pytest.fixture
def codec():
    return AccessTokenCodec(TEST_SECRET, expires_delta=timedelta(days=7))


@pytest.fixture
def password_hasher():
    hasher = MagicMock()
    hasher.hash = AsyncMock(return_value="$2b$12$hashed")
    hasher.verify = AsyncMock(return_value=True)
    return hasher


@pytest.fixture
def email_sender():
    sender = MagicMock()
    sender.send_welcome_email = AsyncMock()
    sender.send_verification_email = AsyncMock()
    sender.send_password_reset_email = AsyncMock()
    return sender
