"""
Authentication API Routes for Libreria.

Handles:
- User registration
- User login (token issued in the ``user-token`` header)
- Logout (token revocation)
"""

from fastapi import APIRouter, Depends, Request, Response, status
from loguru import logger

from libreria.api.dependencies import (
    Settings,
    get_settings,
    get_user_repository,
    get_token_issuer,
    get_client_ip,
    require_token,
)
from libreria.api.schemas import (
    UserRegister,
    UserLogin,
    UserEnvelope,
    UserResponse,
    LoginResponse,
    LoginData,
    MessageResponse,
    ErrorResponse,
)
from libreria.auth import TokenIssuer, TokenClaims
from libreria.errors import ValidationError
from libreria.security import get_password_hash
from libreria.storage import UserRepository

router = APIRouter(prefix="/users", tags=["users"])

TOKEN_HEADER = "user-token"


@router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid data or email already registered"},
    },
)
async def register(
    payload: UserRegister,
    users: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_settings),
):
    """Register a new user."""
    if await users.get_by_email(payload.email):
        raise ValidationError("Email already registered")

    user = await users.create(
        name=payload.name,
        email=payload.email,
        password_hash=get_password_hash(payload.password, rounds=settings.bcrypt_rounds),
    )
    logger.info(f"User registered: {user.email}")

    return UserEnvelope(data=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid data, unknown user or wrong password"},
    },
)
async def login(
    payload: UserLogin,
    response: Response,
    issuer: TokenIssuer = Depends(get_token_issuer),
    client_ip: str = Depends(get_client_ip),
):
    """
    Login endpoint.

    Returns the token in the ``user-token`` header. A still-valid token from
    an earlier login is returned again instead of minting a new one.
    """
    issued = await issuer.login(payload.email, payload.password)
    logger.info(
        f"Login for {issued.email} from {client_ip} "
        f"({'reused' if issued.reused else 'new'} token)"
    )

    response.headers[TOKEN_HEADER] = issued.token
    return LoginResponse(
        data=LoginData(
            message=f"Welcome {issued.name} - {issued.email}",
            name=issued.name,
            email=issued.email,
        )
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid, expired or revoked token"},
        401: {"model": ErrorResponse, "description": "No token supplied"},
    },
)
async def logout(
    request: Request,
    claims: TokenClaims = Depends(require_token),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Revoke the token used for this request."""
    await issuer.revoke(request.state.token)
    logger.info(f"Logout for {claims.email}")
    return MessageResponse(message="Session closed")
