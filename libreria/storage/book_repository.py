"""
Book Repository for Libreria

Structured storage for the book catalog using SQLAlchemy's async ORM:
- SQLite (aiosqlite) for development/testing
- Any async SQLAlchemy URL in production
- Case-insensitive substring search on title and author, Unicode-aware
  through casefolded copies of both columns

Design Decisions:
1. One repository per request, bound to the request's AsyncSession
2. Writes commit immediately; a failed write never undoes an earlier one
3. Hard deletes: the catalog keeps no history
"""

import unicodedata
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from loguru import logger
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Book


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )


def fold(value: str) -> str:
    """Search key: NFC-normalized and casefolded, so "AÑOS" finds "años"."""
    return unicodedata.normalize("NFC", value).casefold()


class BookRepository:
    """
    Repository for book CRUD operations.

    Usage:
        repo = BookRepository(session)

        book = await repo.create(
            title="El Quijote",
            author="Miguel de Cervantes",
            published_year="1605",
            status="available",
        )

        results = await repo.search(title="quijote")
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        title: str,
        author: str,
        published_year: str,
        status: str = "available",
    ) -> Book:
        """
        Create a new book.

        Args:
            title: Book title
            author: Author name
            published_year: Four-digit year
            status: "available" or "reserved"

        Returns:
            Created Book
        """
        book = Book(
            id=str(uuid4()),
            title=title,
            author=author,
            title_search=fold(title),
            author_search=fold(author),
            published_year=published_year,
            status=status,
        )
        self.session.add(book)
        await self.session.commit()
        await self.session.refresh(book)

        logger.debug(f"Book created: {book.id}")
        return book

    async def get(self, book_id: str) -> Optional[Book]:
        """Get book by ID, or None."""
        return await self.session.get(Book, book_id)

    async def list_all(self) -> list[Book]:
        """List every book, oldest first."""
        stmt = select(Book).order_by(Book.created_at.asc(), Book.id.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> list[Book]:
        """
        Case-insensitive substring search.

        Matches against the casefolded title and author copies, so any
        Unicode letter compares without case.
        Both criteria must match when both are given.

        Args:
            title: Fragment of the title
            author: Fragment of the author name

        Returns:
            Matching books
        """
        stmt = select(Book)
        if title:
            stmt = stmt.where(Book.title_search.like(f"%{_escape_like(fold(title))}%", escape="\\"))
        if author:
            stmt = stmt.where(Book.author_search.like(f"%{_escape_like(fold(author))}%", escape="\\"))
        stmt = stmt.order_by(Book.title.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, book_id: str, **updates) -> Optional[Book]:
        """
        Update book fields.

        Args:
            book_id: Book ID
            **updates: Fields to update

        Returns:
            Updated Book or None
        """
        book = await self.session.get(Book, book_id)
        if book is None:
            return None

        for key, value in updates.items():
            if hasattr(book, key):
                setattr(book, key, value)

        book.title_search = fold(book.title)
        book.author_search = fold(book.author)

        book.updated_at = datetime.now(timezone.utc)
        await self.session.commit()
        await self.session.refresh(book)
        return book

    async def delete(self, book_id: str) -> bool:
        """
        Delete a book.

        Returns:
            True if a row was deleted
        """
        result = await self.session.execute(delete(Book).where(Book.id == book_id))
        await self.session.commit()
        return result.rowcount > 0
