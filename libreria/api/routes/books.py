"""
Book API Routes

CRUD operations for the catalog: list, search, read, create, replace,
patch and delete. Writes require a valid token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger

from libreria.api.dependencies import get_book_repository, require_token
from libreria.api.schemas import (
    BookCreate,
    BookUpdate,
    BookResponse,
    BookEnvelope,
    MessageResponse,
    ErrorResponse,
)
from libreria.auth import TokenClaims
from libreria.errors import NotFoundError, ValidationError
from libreria.storage import BookRepository


router = APIRouter(prefix="/libros", tags=["books"])

AUTH_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid data or token"},
    401: {"model": ErrorResponse, "description": "No token supplied"},
    404: {"model": ErrorResponse, "description": "Book not found"},
}


# =============================================================================
# Read Endpoints
# =============================================================================

@router.get("", response_model=list[BookResponse])
async def list_books(repo: BookRepository = Depends(get_book_repository)):
    """List every book in the catalog."""
    books = await repo.list_all()
    logger.info(f"Listing {len(books)} books")
    return books


@router.get(
    "/buscar",
    response_model=list[BookResponse],
    responses={
        400: {"model": ErrorResponse, "description": "No search criteria"},
        404: {"model": ErrorResponse, "description": "No matches"},
    },
)
async def search_books(
    title: Optional[str] = Query(None, description="Fragment of the title"),
    author: Optional[str] = Query(None, description="Fragment of the author"),
    repo: BookRepository = Depends(get_book_repository),
):
    """
    Search books by title, author or both.

    Matching is a case-insensitive substring match; both criteria must hold
    when both are given.
    """
    if not title and not author:
        raise ValidationError("Provide a title or an author to search for")

    logger.info(f"Searching books: title={title!r} author={author!r}")
    books = await repo.search(title=title, author=author)
    if not books:
        raise NotFoundError("Book", message="No books match the search criteria")
    return books


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    responses={404: {"model": ErrorResponse, "description": "Book not found"}},
)
async def get_book(
    book_id: str,
    repo: BookRepository = Depends(get_book_repository),
):
    """Get a book by ID."""
    book = await repo.get(book_id)
    if book is None:
        raise NotFoundError("Book", book_id)
    return book


# =============================================================================
# Write Endpoints
# =============================================================================

@router.post(
    "",
    response_model=BookEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=AUTH_RESPONSES,
)
async def create_book(
    book: BookCreate,
    claims: TokenClaims = Depends(require_token),
    repo: BookRepository = Depends(get_book_repository),
):
    """Add a book to the catalog."""
    logger.info(f"Creating book: {book.title} by {book.author} (user {claims.email})")

    created = await repo.create(
        title=book.title,
        author=book.author,
        published_year=book.published_year,
        status=book.status.value,
    )
    return BookEnvelope(data=BookResponse.model_validate(created))


@router.put("/{book_id}", response_model=BookResponse, responses=AUTH_RESPONSES)
async def replace_book(
    book_id: str,
    book: BookCreate,
    claims: TokenClaims = Depends(require_token),
    repo: BookRepository = Depends(get_book_repository),
):
    """Replace every field of a book."""
    logger.info(f"Replacing book: {book_id} (user {claims.email})")

    updated = await repo.update(
        book_id,
        title=book.title,
        author=book.author,
        published_year=book.published_year,
        status=book.status.value,
    )
    if updated is None:
        raise NotFoundError("Book", book_id)
    return updated


@router.patch("/{book_id}", response_model=BookResponse, responses=AUTH_RESPONSES)
async def patch_book(
    book_id: str,
    book: BookUpdate,
    claims: TokenClaims = Depends(require_token),
    repo: BookRepository = Depends(get_book_repository),
):
    """Update only the supplied fields of a book."""
    updates = book.model_dump(exclude_unset=True)
    if "status" in updates:
        updates["status"] = updates["status"].value

    logger.info(f"Patching book: {book_id} fields={sorted(updates)} (user {claims.email})")

    updated = await repo.update(book_id, **updates)
    if updated is None:
        raise NotFoundError("Book", book_id)
    return updated


@router.delete("/{book_id}", response_model=MessageResponse, responses=AUTH_RESPONSES)
async def delete_book(
    book_id: str,
    claims: TokenClaims = Depends(require_token),
    repo: BookRepository = Depends(get_book_repository),
):
    """Delete a book."""
    logger.info(f"Deleting book: {book_id} (user {claims.email})")

    if not await repo.delete(book_id):
        raise NotFoundError("Book", book_id)
    return MessageResponse(message="Book deleted")
