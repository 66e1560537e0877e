"""
Logout handler.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from loguru import logger

from ..api_client import APIError, LibreriaAPIClient
from ..dependencies import get_api_client
from ..session import end_session, flash, read_token

router = APIRouter(tags=["Login"])


@router.get("/logout")
async def logout(
    request: Request,
    api: LibreriaAPIClient = Depends(get_api_client),
):
    """
    Revoke the API token and clear the browser session.

    Cookies are cleared even when the API refuses the revoke, e.g. for a
    token that already expired.
    """
    token = read_token(request)
    if token:
        try:
            await api.logout(token)
        except APIError as e:
            logger.warning(f"Token revoke failed: {e.message}")

    response = RedirectResponse("/", status_code=303)
    end_session(request, response)
    flash(request, "info", "Session closed", "See you soon")
    return response
