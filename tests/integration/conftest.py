import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel, select

from config import ApplicationConfig
from credential_service.api.app import create_app
from credential_service.depends import get_notification_dispatcher
from credential_service.domain.entities import Account
from tests.fixtures.fake_dispatcher import RecordingDispatcher
from tests.fixtures.json_loader import TestDataLoader


class IntegrationConfig(ApplicationConfig):
    DB_URI = "sqlite+aiosqlite:///./test.db"
    DB_CONNECT_RETRIES = 1
    API_PREFIX = "/api"
    JWT_SECRET = "integration-test-secret"
    BCRYPT_ROUNDS = 4
    STORE_RETRY_BASE_DELAY = 0.0
    MAIL_RETRY_BASE_DELAY = 0.0
    MAIL_SUPPRESS_SEND = True
    MAIL_FROM = "mailer@example.com"


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def app():
    app = create_app(IntegrationConfig)
    database = app.state.services.database
    async with database.engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await database.connect()
    yield app
    async with database.engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await database.disconnect()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest_asyncio.fixture
async def client(app, dispatcher):
    app.dependency_overrides[get_notification_dispatcher] = lambda: dispatcher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def fetch_account(app):
    """Read an account through a fresh session so earlier reads are not cached"""
    session_factory = app.state.services.database.session_factory

    async def fetch(email: str):
        async with session_factory() as session:
            result = await session.exec(select(Account).where(Account.email == email))
            return result.one_or_none()

    return fetch


@pytest_asyncio.fixture
async def insert_account(app):
    session_factory = app.state.services.database.session_factory

    async def insert(account: Account) -> Account:
        async with session_factory() as session:
            session.add(account)
            await session.commit()
            await session.refresh(account)
            return account

    return insert
