import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_email_sender, get_oauth_providers, get_unit_of_work
from src.domain.entities import Account
from tests.integration.helpers import (
    ADMIN_API_KEY,
    PASSWORD,
    FakeOAuthProvider,
    IntegrationConfig,
    RecordingEmailSender,
)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        # Concurrent writers wait on the file lock instead of failing fast
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def email_sender():
    return RecordingEmailSender()


@pytest.fixture
def google():
    return FakeOAuthProvider("google")


def build_app(override_get_unit_of_work, email_sender, google):
    from src.api.app import create_app

    app = create_app(IntegrationConfig)
    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_oauth_providers] = lambda: {"google": google}
    return app


@pytest_asyncio.fixture
async def client(db_session, email_sender, google):
    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app = build_app(override_get_unit_of_work, email_sender, google)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def isolated_client(engine, email_sender, google):
    """Client whose requests each run on their own connection, as in production"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_unit_of_work():
        async with Session() as session:
            yield SqlAlchemyUnitOfWork(session)

    app = build_app(override_get_unit_of_work, email_sender, google)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {"X-Admin-API-Key": ADMIN_API_KEY}


@pytest.fixture
def register(client):
    """Register an account, drop the cookies it set, return the response body"""

    async def _register(email: str = "alice@example.com", **overrides) -> dict:
        payload = {
            "email": email,
            "password": PASSWORD,
            "firstName": "Alice",
            "lastName": "Smith",
            "organizationName": "Acme Fitness",
            "industry": "fitness",
        }
        payload.update(overrides)
        response = await client.post("/auth/register", json=payload)
        assert response.status_code == 201, response.text
        client.cookies.clear()
        return response.json()

    return _register


@pytest.fixture
def set_account_fields(db_session):
    """Write account columns directly, bypassing the API"""

    async def _set(public_id: str, **values) -> None:
        await db_session.execute(
            update(Account).where(Account.public_id == public_id).values(**values)
        )
        await db_session.commit()

    return _set


@pytest.fixture
def load_account(db_session):
    """Read an account straight from the database"""

    async def _load(public_id: str) -> Account:
        stmt = (
            select(Account)
            .where(Account.public_id == public_id)
            .execution_options(populate_existing=True)
        )
        result = await db_session.exec(stmt)
        return result.one()

    return _load
