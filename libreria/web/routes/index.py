"""
Landing and user pages.
"""

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from ..session import read_user
from ..templating import render

router = APIRouter(tags=["Pages"])


@router.get("/")
async def index(request: Request):
    """Login and registration forms; logged-in users go to their page."""
    if read_user(request):
        return RedirectResponse("/user", status_code=303)

    return render(request, "index.html", {"title": "Libreria - Welcome"})


@router.get("/user")
async def user_page(request: Request):
    user = read_user(request)
    if not user:
        return RedirectResponse("/", status_code=303)

    return render(request, "user.html", {"title": f"Libreria - {user['name']}"})
