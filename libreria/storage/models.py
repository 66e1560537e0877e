"""
Database models for Libreria.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, DateTime, CheckConstraint, Index, true
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Registered user."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)  # UUID
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class AuthToken(Base):
    """Issued token. At most one active row per email."""
    __tablename__ = "tokens"

    id = Column(String(36), primary_key=True)  # UUID
    email = Column(String(255), nullable=False, index=True)
    token = Column(String(1024), nullable=False, unique=True)
    active = Column(Boolean, nullable=False, default=True)
    issued_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        Index(
            "uq_tokens_active_email",
            "email",
            unique=True,
            sqlite_where=(active == true()),
            postgresql_where=(active == true()),
        ),
    )


class Book(Base):
    """Catalog entry."""
    __tablename__ = "books"

    id = Column(String(36), primary_key=True)  # UUID
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    # Casefolded copies used by search; maintained by BookRepository
    title_search = Column(String(1024), nullable=False, default="")
    author_search = Column(String(1024), nullable=False, default="")
    published_year = Column(String(4), nullable=False)
    status = Column(String(20), nullable=False, default="available")
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("status IN ('available', 'reserved')", name="ck_books_status"),
        Index("idx_books_title_author", "title", "author"),
    )
