"""
Browser-side session state for the web client.

- ``user-token``: the API token, httpOnly
- ``user-data``: name and email, signed so it cannot be edited client-side
- flash notices, kept in the signed Starlette session until shown once
"""

from typing import Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, URLSafeSerializer

from .api_client import LoginResult

TOKEN_COOKIE = "user-token"
USER_COOKIE = "user-data"

_FLASH_KEY = "flash"


def _serializer(request: Request) -> URLSafeSerializer:
    return URLSafeSerializer(request.app.state.settings.secret_key, salt=USER_COOKIE)


def flash(request: Request, icon: str, title: str, text: str) -> None:
    """Queue a notice for the next rendered page."""
    request.session[_FLASH_KEY] = {"icon": icon, "title": title, "text": text}


def pop_flash(request: Request) -> Optional[dict]:
    return request.session.pop(_FLASH_KEY, None)


def read_user(request: Request) -> Optional[dict]:
    """
    Identity of the logged-in user, or None.

    A user counts as logged in only when both cookies are present and the
    user-data cookie carries a valid signature.
    """
    if not request.cookies.get(TOKEN_COOKIE):
        return None

    raw = request.cookies.get(USER_COOKIE)
    if not raw:
        return None

    try:
        user = _serializer(request).loads(raw)
    except BadSignature:
        return None

    if not isinstance(user, dict) or not user.get("auth"):
        return None
    return user


def read_token(request: Request) -> Optional[str]:
    return request.cookies.get(TOKEN_COOKIE) or None


def start_session(request: Request, response: Response, login: LoginResult) -> None:
    """Store the token and the signed identity cookies on ``response``."""
    secure = request.app.state.settings.secure_cookies
    user_data = {"name": login.name, "email": login.email, "auth": True}

    response.set_cookie(TOKEN_COOKIE, login.token, httponly=True, secure=secure, samesite="lax")
    response.set_cookie(
        USER_COOKIE,
        _serializer(request).dumps(user_data),
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def end_session(request: Request, response: Response) -> None:
    response.delete_cookie(TOKEN_COOKIE)
    response.delete_cookie(USER_COOKIE)
    request.session.clear()
