"""
Credential store.
"""

from typing import Optional
from uuid import uuid4

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import ValidationError
from .models import User


class UserRepository:
    """Users are created once and never modified or deleted."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def create(self, name: str, email: str, password_hash: str) -> User:
        """
        Insert a user.

        Raises:
            ValidationError: The email is already registered.
        """
        user = User(
            id=str(uuid4()),
            name=name,
            email=email,
            password_hash=password_hash,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.warning(f"Concurrent registration for {email}")
            raise ValidationError("Email already registered")

        await self.session.refresh(user)
        return user
