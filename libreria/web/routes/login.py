"""
Login and registration form handlers.
"""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from loguru import logger

from ..api_client import APIError, LibreriaAPIClient
from ..dependencies import get_api_client
from ..session import flash, start_session

router = APIRouter(prefix="/login", tags=["Login"])


@router.post("/auth")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    api: LibreriaAPIClient = Depends(get_api_client),
):
    """Log in against the API and keep the token in cookies."""
    try:
        result = await api.login(email, password)
    except APIError as e:
        if e.status_code == 400:
            flash(request, "error", "Wrong login data", e.message)
        else:
            flash(request, "error", "Server error", "Login is unavailable, try again later")
        return RedirectResponse("/", status_code=303)

    logger.info(f"User logged in: {result.email}")

    response = RedirectResponse("/user", status_code=303)
    start_session(request, response, result)
    flash(request, "success", "Welcome", result.message)
    return response


@router.post("/register")
async def register(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    api: LibreriaAPIClient = Depends(get_api_client),
):
    try:
        user = await api.register(name, email, password)
    except APIError as e:
        flash(request, "error", "Registration failed", e.message)
        return RedirectResponse("/", status_code=303)

    logger.info(f"User registered: {user['email']}")
    flash(request, "success", "Registration complete", "You can now log in")
    return RedirectResponse("/", status_code=303)
