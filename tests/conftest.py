"""
Pytest configuration and fixtures for Libreria tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from libreria.api.main import create_app
from libreria.api.dependencies import (
    Settings,
    get_settings,
    init_database,
    create_tables,
    dispose_database,
)
from libreria.storage import Base, BookRepository, UserRepository, TokenRepository
from libreria.web.api_client import LibreriaAPIClient
from libreria.web.config import WebSettings
from libreria.web.main import create_web_app

TEST_SECRET = "test-secret"


# =============================================================================
# Test Settings
# =============================================================================

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Return settings configured for testing."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        database_echo=False,
        token_secret=TEST_SECRET,
        bcrypt_rounds=4,
        environment="test",
        debug=True,
    )


@pytest.fixture
def web_settings() -> WebSettings:
    return WebSettings(
        api_url="http://api/endpoint",
        secret_key="test-web-secret",
        debug=True,
    )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def async_engine(tmp_path):
    """Create async database engine for repository tests."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'repo.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide database session for tests."""
    session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def book_repo(db_session) -> BookRepository:
    return BookRepository(db_session)


@pytest.fixture
def user_repo(db_session) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def token_repo(db_session) -> TokenRepository:
    return TokenRepository(db_session)


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def app(test_settings):
    """Create FastAPI application for testing."""
    # ASGITransport does not run the lifespan, so the database is set up here
    init_database(test_settings)
    await create_tables()

    application = create_app(test_settings)
    application.dependency_overrides[get_settings] = lambda: test_settings

    yield application

    application.dependency_overrides.clear()
    await dispose_database()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def web_app(app, web_settings):
    """Web client application wired to the in-process API."""
    api_client = LibreriaAPIClient(
        web_settings.api_url,
        transport=ASGITransport(app=app),
    )
    application = create_web_app(web_settings, api_client=api_client)

    yield application

    await api_client.close()


@pytest_asyncio.fixture(scope="function")
async def web_client(web_app) -> AsyncGenerator[AsyncClient, None]:
    """Browser-like client for the web app; keeps cookies between requests."""
    transport = ASGITransport(app=web_app)
    async with AsyncClient(transport=transport, base_url="http://web") as ac:
        yield ac


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_user() -> dict:
    return {
        "name": "Juan Perez",
        "email": "juan.perez@ejemplo.com",
        "password": "contrasena123",
    }


@pytest.fixture
def sample_book() -> dict:
    return {
        "title": "El Quijote",
        "author": "Miguel de Cervantes",
        "publishedYear": "1605",
        "status": "available",
    }


@pytest.fixture
def sample_books() -> list[dict]:
    return [
        {
            "title": "El Quijote",
            "author": "Miguel de Cervantes",
            "publishedYear": "1605",
            "status": "available",
        },
        {
            "title": "Cien años de soledad",
            "author": "Gabriel García Márquez",
            "publishedYear": "1967",
            "status": "reserved",
        },
        {
            "title": "La casa de los espíritus",
            "author": "Isabel Allende",
            "publishedYear": "1982",
            "status": "available",
        },
    ]


@pytest_asyncio.fixture
async def registered_user(client, sample_user) -> dict:
    response = await client.post("/endpoint/users/register", json=sample_user)
    assert response.status_code == 201
    return sample_user


@pytest_asyncio.fixture
async def token(client, registered_user) -> str:
    """Token issued to the registered sample user."""
    response = await client.post(
        "/endpoint/users/login",
        json={"email": registered_user["email"], "password": registered_user["password"]},
    )
    assert response.status_code == 200
    return response.headers["user-token"]


@pytest.fixture
def auth_headers(token) -> dict:
    return {"auth-token": token}
