"""
Token store.

Rows map an email to an issued token string. A partial unique index keeps at
most one active row per email, so two logins racing to insert cannot both win.
"""

from typing import Optional
from uuid import uuid4

from loguru import logger
from sqlalchemy import select, delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AuthToken


class TokenRepository:
    """Repository for issued tokens."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_active(self, email: str) -> Optional[AuthToken]:
        """Get the active token row for an email, if any."""
        stmt = select(AuthToken).where(
            AuthToken.email == email,
            AuthToken.active.is_(True),
        )
        return (await self.session.execute(stmt)).scalars().first()

    async def get_by_token(self, token: str) -> Optional[AuthToken]:
        stmt = select(AuthToken).where(AuthToken.token == token)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def add(self, email: str, token: str) -> AuthToken:
        """
        Store a freshly minted token as the active one for ``email``.

        Skips the write when the exact token string is already stored. When a
        concurrent login inserted an active row first, that row is returned
        and the new token is discarded.

        Returns:
            The stored row holding the token the caller should hand out.
        """
        existing = await self.get_by_token(token)
        if existing is not None:
            return existing

        row = AuthToken(id=str(uuid4()), email=email, token=token, active=True)
        self.session.add(row)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            winner = await self.get_active(email)
            if winner is None:
                raise
            logger.info(f"Concurrent login for {email}; reusing stored token")
            return winner

        await self.session.refresh(row)
        return row

    async def delete(self, token: str) -> bool:
        """Delete the row holding ``token``."""
        result = await self.session.execute(delete(AuthToken).where(AuthToken.token == token))
        await self.session.commit()
        return result.rowcount > 0

    async def revoke(self, token: str) -> bool:
        """
        Deactivate ``token``.

        Returns:
            True if an active row was deactivated
        """
        result = await self.session.execute(
            update(AuthToken)
            .where(AuthToken.token == token, AuthToken.active.is_(True))
            .values(active=False)
        )
        await self.session.commit()
        return result.rowcount > 0
