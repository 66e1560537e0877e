"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Database sessions
- Repositories and the auth services built on them
- Token authentication for protected routes
"""

import os
from typing import AsyncGenerator, Optional
from functools import lru_cache
from dataclasses import dataclass

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from ..auth import TokenIssuer, TokenValidator, TokenClaims
from ..security import ALGORITHM, ACCESS_TOKEN_EXPIRE_HOURS, DEFAULT_BCRYPT_ROUNDS
from ..storage import BookRepository, UserRepository, TokenRepository


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./libreria.db"
    database_echo: bool = False

    # Tokens
    token_secret: str = "change-me"
    token_algorithm: str = ALGORITHM
    token_expire_hours: int = ACCESS_TOKEN_EXPIRE_HOURS

    # Password hashing
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 4000

    # Comma-separated origins allowed to call the API from a browser
    cors_allowed_origins: str = ""

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            token_secret=os.getenv("TOKEN_SECRET", cls.token_secret),
            token_algorithm=os.getenv("TOKEN_ALGORITHM", cls.token_algorithm),
            token_expire_hours=int(os.getenv("TOKEN_EXPIRE_HOURS", cls.token_expire_hours)),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", cls.bcrypt_rounds)),
            api_host=os.getenv("APIHOST", cls.api_host),
            api_port=int(os.getenv("APIPORT", cls.api_port)),
            cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", cls.cors_allowed_origins),
            environment=os.getenv("LIBRERIA_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Database
# =============================================================================

# Global engine and session factory (initialized in lifespan)
_engine = None
_async_session_factory = None


def init_database(settings: Settings) -> None:
    """Initialize database engine and session factory."""
    global _engine, _async_session_factory

    _engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )

    _async_session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def dispose_database() -> None:
    """Close all pooled connections."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Yields:
        AsyncSession for database operations.
    """
    if _async_session_factory is None:
        raise RuntimeError("Database not initialized. Call init_database first.")

    async with _async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create database tables."""
    from ..storage.models import Base
    if _engine is None:
        raise RuntimeError("Database not initialized.")

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_database() -> bool:
    """Run a trivial query to confirm the database answers."""
    from sqlalchemy import text
    if _engine is None:
        return False

    async with _engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


# =============================================================================
# Repositories
# =============================================================================

def get_book_repository(db: AsyncSession = Depends(get_db)) -> BookRepository:
    """Dependency for book repository."""
    return BookRepository(db)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Dependency for user repository."""
    return UserRepository(db)


def get_token_repository(db: AsyncSession = Depends(get_db)) -> TokenRepository:
    """Dependency for token repository."""
    return TokenRepository(db)


# =============================================================================
# Auth Services
# =============================================================================

def get_token_issuer(
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenRepository = Depends(get_token_repository),
    settings: Settings = Depends(get_settings),
) -> TokenIssuer:
    """Dependency for the login token issuer."""
    return TokenIssuer(
        users=users,
        tokens=tokens,
        secret_key=settings.token_secret,
        algorithm=settings.token_algorithm,
        expire_hours=settings.token_expire_hours,
    )


def get_token_validator(
    tokens: TokenRepository = Depends(get_token_repository),
    settings: Settings = Depends(get_settings),
) -> TokenValidator:
    """Dependency for the protected-route token validator."""
    return TokenValidator(
        tokens=tokens,
        secret_key=settings.token_secret,
        algorithm=settings.token_algorithm,
    )


# =============================================================================
# Authentication Dependencies
# =============================================================================

async def require_token(
    request: Request,
    auth_token: Optional[str] = Header(None, alias="auth-token"),
    authorization: Optional[str] = Header(None),
    validator: TokenValidator = Depends(get_token_validator),
) -> TokenClaims:
    """
    Require a valid token for protected endpoints.

    Accepts either the ``auth-token`` header or ``Authorization: Bearer``.
    On success the claims are attached to ``request.state.user``.

    Raises:
        UnauthorizedError, InvalidTokenError, TokenExpiredError,
        RevokedTokenError: depending on why the token was rejected.
    """
    check = await validator.validate(auth_token=auth_token, authorization=authorization)
    if not check.ok:
        raise check.to_exception()

    request.state.user = check.claims
    request.state.token = check.token
    return check.claims


# =============================================================================
# Request Context Dependencies
# =============================================================================

async def get_client_ip(request: Request) -> str:
    """Extract client IP from request, considering proxies."""
    # Check X-Forwarded-For header
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    # Check X-Real-IP header
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    # Fall back to direct client
    if request.client:
        return request.client.host

    return "unknown"
