import pytest

from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher


@pytest.fixture
def hasher():
    # Minimum cost keeps the suite fast; production uses 12
    return BcryptPasswordHasher(rounds=4)


@pytest.mark.asyncio
async def test_hash_and_verify(hasher):
    digest = await hasher.hash("Secret123")

    assert digest != "Secret123"
    assert digest.startswith("$2b$04$")
    assert await hasher.verify("Secret123", digest) is True
    assert await hasher.verify("WrongPass", digest) is False


@pytest.mark.asyncio
async def test_hashes_are_salted(hasher):
    assert await hasher.hash("Secret123") != await hasher.hash("Secret123")


@pytest.mark.asyncio
async def test_missing_digest_never_verifies(hasher):
    assert await hasher.verify("Secret123", None) is False
    assert await hasher.verify("Secret123", "") is False


@pytest.mark.asyncio
async def test_malformed_digest_never_verifies(hasher):
    assert await hasher.verify("Secret123", "not-a-bcrypt-hash") is False


@pytest.mark.asyncio
async def test_long_passwords_are_accepted(hasher):
    password = "p" * 100

    digest = await hasher.hash(password)

    assert await hasher.verify(password, digest) is True
