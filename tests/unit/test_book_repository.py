"""
Unit tests for the book repository.
"""

import pytest

pytestmark = pytest.mark.asyncio


async def _seed(book_repo, sample_books):
    created = []
    for book in sample_books:
        created.append(
            await book_repo.create(
                title=book["title"],
                author=book["author"],
                published_year=book["publishedYear"],
                status=book["status"],
            )
        )
    return created


class TestBookRepository:
    """Tests for BookRepository CRUD and search."""

    async def test_create_and_get(self, book_repo, sample_books):
        created = (await _seed(book_repo, sample_books[:1]))[0]

        fetched = await book_repo.get(created.id)

        assert fetched is not None
        assert fetched.title == "El Quijote"
        assert fetched.published_year == "1605"
        assert fetched.status == "available"

    async def test_get_missing_returns_none(self, book_repo):
        assert await book_repo.get("no-such-book") is None

    async def test_list_all(self, book_repo, sample_books):
        await _seed(book_repo, sample_books)

        books = await book_repo.list_all()

        assert len(books) == len(sample_books)

    async def test_search_is_case_insensitive_substring(self, book_repo, sample_books):
        await _seed(book_repo, sample_books)

        books = await book_repo.search(title="quijote")

        assert [book.title for book in books] == ["El Quijote"]

    async def test_search_matches_accented_letters_in_any_case(self, book_repo, sample_books):
        await _seed(book_repo, sample_books)

        assert [book.title for book in await book_repo.search(title="AÑOS")] == ["Cien años de soledad"]
        assert len(await book_repo.search(author="GARCÍA MÁRQUEZ")) == 1
        assert len(await book_repo.search(title="ESPÍRITUS", author="allende")) == 1

    async def test_search_follows_updated_title(self, book_repo, sample_books):
        created = (await _seed(book_repo, sample_books[:1]))[0]

        await book_repo.update(created.id, title="Niñez y Ávila")

        assert len(await book_repo.search(title="NIÑEZ")) == 1
        assert await book_repo.search(title="quijote") == []

    async def test_search_combines_criteria(self, book_repo, sample_books):
        await _seed(book_repo, sample_books)

        assert len(await book_repo.search(title="la casa", author="allende")) == 1
        assert await book_repo.search(title="la casa", author="cervantes") == []

    async def test_search_treats_wildcards_literally(self, book_repo, sample_books):
        await _seed(book_repo, sample_books)

        assert await book_repo.search(title="%") == []
        assert await book_repo.search(author="_") == []

    async def test_update(self, book_repo, sample_books):
        created = (await _seed(book_repo, sample_books[:1]))[0]

        updated = await book_repo.update(created.id, status="reserved")

        assert updated.status == "reserved"
        assert updated.title == "El Quijote"

    async def test_update_missing_returns_none(self, book_repo):
        assert await book_repo.update("no-such-book", status="reserved") is None

    async def test_delete(self, book_repo, sample_books):
        created = (await _seed(book_repo, sample_books[:1]))[0]

        assert await book_repo.delete(created.id) is True
        assert await book_repo.get(created.id) is None
        assert await book_repo.delete(created.id) is False
