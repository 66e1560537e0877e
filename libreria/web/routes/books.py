"""
Book pages: list, search, add, edit and delete.

Read pages are public. Write pages need a logged-in user; the stored token is
forwarded to the API, which has the final say on whether it is still valid.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from loguru import logger

from ..api_client import APIError, LibreriaAPIClient
from ..dependencies import get_api_client
from ..session import flash, read_token, read_user
from ..templating import render

router = APIRouter(prefix="/books", tags=["Books"])

BOOK_STATUSES = ("available", "reserved")


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _login_required(request: Request) -> Optional[str]:
    """Token of the logged-in user, or None after queueing a notice."""
    token = read_token(request)
    if token and read_user(request):
        return token

    flash(request, "warning", "Login required", "Log in to manage books")
    return None


def _book_form(title: str, author: str, published_year: str, status: str) -> dict:
    return {
        "title": title,
        "author": author,
        "publishedYear": published_year,
        "status": status,
    }


# =============================================================================
# Read pages
# =============================================================================

@router.get("/list")
async def list_books(
    request: Request,
    api: LibreriaAPIClient = Depends(get_api_client),
):
    try:
        books = await api.list_books()
    except APIError as e:
        flash(request, "error", "Could not load books", e.message)
        return _redirect("/")

    return render(request, "books/list.html", {"title": "Libreria - Books", "books": books})


@router.get("/search")
async def search_form(request: Request):
    return render(request, "books/search.html", {"title": "Libreria - Search"})


@router.get("/result")
async def search_results(
    request: Request,
    title: Optional[str] = None,
    author: Optional[str] = None,
    api: LibreriaAPIClient = Depends(get_api_client),
):
    """Run a search and show the matches, or a notice when nothing matched."""
    try:
        books = await api.search_books(title=title, author=author)
    except APIError as e:
        if e.status_code == 404:
            flash(request, "info", "No results", "No books match your search")
        else:
            flash(request, "error", "Search failed", e.message)
        books = []

    return render(
        request,
        "books/result.html",
        {
            "title": "Libreria - Results",
            "books": books,
            "query": {"title": title or "", "author": author or ""},
        },
    )


# =============================================================================
# Add
# =============================================================================

@router.get("/add")
async def add_form(request: Request):
    if not _login_required(request):
        return _redirect("/")

    return render(
        request,
        "books/add.html",
        {"title": "Libreria - Add book", "statuses": BOOK_STATUSES},
    )


@router.post("/add/new")
async def add_book(
    request: Request,
    title: str = Form(""),
    author: str = Form(""),
    publishedYear: str = Form(""),
    status: str = Form("available"),
    api: LibreriaAPIClient = Depends(get_api_client),
):
    token = _login_required(request)
    if not token:
        return _redirect("/")

    try:
        book = await api.create_book(token, _book_form(title, author, publishedYear, status))
    except APIError as e:
        flash(request, "error", "Book not added", e.message)
        return _redirect("/books/add")

    logger.info(f"Book created via web client: {book['id']}")
    flash(request, "success", "Book added", f"'{book['title']}' is now in the catalog")
    return _redirect("/books/list")


# =============================================================================
# Edit
# =============================================================================

@router.get("/edit/{book_id}")
async def edit_form(
    request: Request,
    book_id: str,
    api: LibreriaAPIClient = Depends(get_api_client),
):
    if not _login_required(request):
        return _redirect("/")

    try:
        book = await api.get_book(book_id)
    except APIError as e:
        flash(request, "error", "Book not found", e.message)
        return _redirect("/books/list")

    return render(
        request,
        "books/edit.html",
        {"title": "Libreria - Edit book", "book": book, "statuses": BOOK_STATUSES},
    )


@router.post("/edit/result/{book_id}")
async def edit_book(
    request: Request,
    book_id: str,
    title: str = Form(""),
    author: str = Form(""),
    publishedYear: str = Form(""),
    status: str = Form("available"),
    api: LibreriaAPIClient = Depends(get_api_client),
):
    token = _login_required(request)
    if not token:
        return _redirect("/")

    try:
        await api.update_book(token, book_id, _book_form(title, author, publishedYear, status))
    except APIError as e:
        flash(request, "error", "Book not updated", e.message)
        return _redirect(f"/books/edit/{book_id}")

    flash(request, "success", "Book updated", "Changes saved")
    return _redirect("/books/list")


# =============================================================================
# Delete
# =============================================================================

@router.get("/delete/{book_id}")
async def delete_form(
    request: Request,
    book_id: str,
    api: LibreriaAPIClient = Depends(get_api_client),
):
    if not _login_required(request):
        return _redirect("/")

    try:
        book = await api.get_book(book_id)
    except APIError as e:
        flash(request, "error", "Book not found", e.message)
        return _redirect("/books/list")

    return render(request, "books/remove.html", {"title": "Libreria - Delete book", "book": book})


@router.post("/delete/result/{book_id}")
async def delete_book(
    request: Request,
    book_id: str,
    api: LibreriaAPIClient = Depends(get_api_client),
):
    token = _login_required(request)
    if not token:
        return _redirect("/")

    try:
        await api.delete_book(token, book_id)
    except APIError as e:
        flash(request, "error", "Book not deleted", e.message)
        return _redirect("/books/list")

    logger.info(f"Book deleted via web client: {book_id}")
    flash(request, "success", "Book deleted", "The book was removed from the catalog")
    return _redirect("/books/list")
