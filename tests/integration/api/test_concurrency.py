"""
Races between requests that each hold their own database connection.

The storage layer is the arbiter: the unique email index for registration,
the conditional DELETE for refresh rotation and the conditional UPDATE for
the failed-login counter.
"""

import asyncio

import pytest
from httpx import AsyncClient

from tests.integration.helpers import PASSWORD

REGISTRATION = {
    "email": "alice@example.com",
    "password": PASSWORD,
    "firstName": "Alice",
    "lastName": "Smith",
    "organizationName": "Acme Fitness",
    "industry": "fitness",
}


async def register(client: AsyncClient) -> dict:
    response = await client.post("/auth/register", json=REGISTRATION)
    assert response.status_code == 201, response.text
    client.cookies.clear()
    return response.json()


@pytest.mark.asyncio
async def test_concurrent_registrations_create_one_account(isolated_client: AsyncClient):
    responses = await asyncio.gather(
        *(isolated_client.post("/auth/register", json=REGISTRATION) for _ in range(3))
    )

    statuses = sorted(response.status_code for response in responses)
    assert statuses == [201, 400, 400]
    for response in responses:
        if response.status_code == 400:
            assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"

    login = await isolated_client.post(
        "/auth/login", json={"email": "alice@example.com", "password": PASSWORD}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_concurrent_rotations_of_one_token(isolated_client: AsyncClient):
    """Only one of several simultaneous refreshes wins

    Given a refresh token
    When four requests present it at the same time
    Then exactly one receives a new pair
    And the others fail with REFRESH_INVALID
    """
    registered = await register(isolated_client)

    responses = await asyncio.gather(
        *(
            isolated_client.post(
                "/auth/refresh", json={"refreshToken": registered["refreshToken"]}
            )
            for _ in range(4)
        )
    )

    winners = [r for r in responses if r.status_code == 200]
    losers = [r for r in responses if r.status_code != 200]
    assert len(winners) == 1
    assert len(losers) == 3
    for response in losers:
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "REFRESH_INVALID"

    # The winner's pair is the one that keeps working
    follow_up = await isolated_client.post(
        "/auth/refresh", json={"refreshToken": winners[0].json()["refreshToken"]}
    )
    assert follow_up.status_code == 200


@pytest.mark.asyncio
async def test_concurrent_failed_logins_are_all_counted(
    isolated_client: AsyncClient, load_account
):
    registered = await register(isolated_client)

    responses = await asyncio.gather(
        *(
            isolated_client.post(
                "/auth/login", json={"email": "alice@example.com", "password": "WrongPass"}
            )
            for _ in range(4)
        )
    )

    assert [r.status_code for r in responses] == [401] * 4
    account = await load_account(registered["account"]["id"])
    assert account.failed_login_attempts == 4
    assert account.lock_until is None


@pytest.mark.asyncio
async def test_concurrent_failed_logins_lock_exactly_once(
    isolated_client: AsyncClient, load_account
):
    """Failures past the threshold never push the counter beyond it

    Given an account with a limit of five failed logins
    When seven wrong passwords arrive at the same time
    Then four are answered 401 and three 423
    And the stored counter stops at five with the account locked
    """
    registered = await register(isolated_client)

    responses = await asyncio.gather(
        *(
            isolated_client.post(
                "/auth/login", json={"email": "alice@example.com", "password": "WrongPass"}
            )
            for _ in range(7)
        )
    )

    statuses = sorted(r.status_code for r in responses)
    assert statuses == [401] * 4 + [423] * 3
    account = await load_account(registered["account"]["id"])
    assert account.failed_login_attempts == 5
    assert account.lock_until is not None
