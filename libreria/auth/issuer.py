"""
Token issuing at login.

A still-valid active token is handed out again instead of minting a new one;
an expired one is deleted and replaced.
"""

from dataclasses import dataclass
from datetime import timedelta

from loguru import logger

from ..errors import UserNotFoundError, InvalidCredentialsError
from ..security import ALGORITHM, ACCESS_TOKEN_EXPIRE_HOURS, create_access_token, verify_password
from ..storage.token_repository import TokenRepository
from ..storage.user_repository import UserRepository
from .validator import verify_signature


@dataclass
class IssuedToken:
    """Result of a successful login."""
    token: str
    user_id: str
    name: str
    email: str
    reused: bool = False


class TokenIssuer:
    """Authenticates users and decides which token they get."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenRepository,
        secret_key: str,
        algorithm: str = ALGORITHM,
        expire_hours: int = ACCESS_TOKEN_EXPIRE_HOURS,
    ):
        self.users = users
        self.tokens = tokens
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_hours = expire_hours

    def _mint(self, user_id: str, email: str) -> str:
        return create_access_token(
            data={"id": user_id, "email": email},
            secret_key=self.secret_key,
            algorithm=self.algorithm,
            expires_delta=timedelta(hours=self.expire_hours),
        )

    async def login(self, email: str, password: str) -> IssuedToken:
        """
        Authenticate and return the token to hand out.

        Raises:
            UserNotFoundError: No user with this email.
            InvalidCredentialsError: Wrong password.
        """
        user = await self.users.get_by_email(email)
        if user is None:
            raise UserNotFoundError(email)

        if not verify_password(password, user.password_hash):
            logger.info(f"Wrong password for {email}")
            raise InvalidCredentialsError()

        # Copied out before any write; a rollback would expire the ORM instance
        user_id, name = user.id, user.name

        active = await self.tokens.get_active(email)
        if active is not None:
            check = verify_signature(active.token, self.secret_key, self.algorithm)
            if check.ok:
                logger.info(f"Reusing active token for {email}")
                return IssuedToken(token=active.token, user_id=user_id, name=name, email=email, reused=True)

            logger.info(f"Stored token for {email} is {check.failure.value}; replacing it")
            await self.tokens.delete(active.token)

        token = self._mint(user_id, email)
        stored = await self.tokens.add(email, token)

        return IssuedToken(
            token=stored.token,
            user_id=user_id,
            name=name,
            email=email,
            reused=stored.token != token,
        )

    async def revoke(self, token: str) -> bool:
        """Deactivate a token so the validator rejects it from now on."""
        revoked = await self.tokens.revoke(token)
        if revoked:
            logger.info("Token revoked")
        return revoked
