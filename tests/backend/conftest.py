import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.config import settings
from app.core import db as db_module
from app.core.security import hash_password
from app.main import app
from app.models.user import User


TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL

API = settings.API_PREFIX
DEFAULT_PASSWORD = "UserPass!23"


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    """
    Fresh database without an HTTP client, for service-level tests.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(password: str = DEFAULT_PASSWORD, email: str | None = None) -> tuple[User, str]:
        user = await User.create(
            name="Test User",
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(password),
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Log in through the API and return an Authorization header carrying the
    session token from the cookie. The client's cookie jar is cleared so that
    requests without the header stay anonymous.
    """

    async def _get_headers(email: str, password: str) -> dict[str, str]:
        resp = await client.post(f"{API}/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        token = resp.cookies[settings.session_cookie_name]
        client.cookies.clear()
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def user_headers(create_user, auth_header_factory):
    """
    Factory: create a user and log them in, returning (user, headers).
    """

    async def _make() -> tuple[User, dict[str, str]]:
        user, password = await create_user()
        headers = await auth_header_factory(user.email, password)
        return user, headers

    return _make
