"""
Libreria API Client

Async HTTP client the web front end uses to talk to the API. Tokens are sent
as ``Authorization: Bearer``; every non-2xx answer becomes an ``APIError``.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx
from loguru import logger

TOKEN_HEADER = "user-token"


class APIError(Exception):
    """The API answered with an error, or could not be reached."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"{status_code}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "APIError":
        try:
            body = response.json()
        except ValueError:
            body = {}

        if not isinstance(body, dict):
            body = {}

        message = body.get("error") or body.get("message") or response.reason_phrase
        return cls(response.status_code, str(message), body.get("code"))


@dataclass
class LoginResult:
    """Token and identity returned by a successful login."""
    token: str
    name: str
    email: str
    message: str


class LibreriaAPIClient:
    """
    Client for the Libreria API.

    Usage:
        client = LibreriaAPIClient("http://localhost:4000/endpoint")
        books = await client.list_books()
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            base_url: API root, including its route prefix.
            timeout: Request timeout in seconds.
            transport: Optional transport, e.g. ``httpx.ASGITransport`` to
                call an in-process API.
        """
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"API request failed: {method} {path}: {e}")
            raise APIError(503, "API unavailable") from e

        if response.is_error:
            error = APIError.from_response(response)
            logger.warning(f"API error: {method} {path} -> {error.status_code} {error.message}")
            raise error

        return response

    # =========================================================================
    # Users
    # =========================================================================

    async def register(self, name: str, email: str, password: str) -> dict:
        response = await self._request(
            "POST",
            "/users/register",
            json={"name": name, "email": email, "password": password},
        )
        return response.json()["data"]

    async def login(self, email: str, password: str) -> LoginResult:
        response = await self._request(
            "POST",
            "/users/login",
            json={"email": email, "password": password},
        )

        token = response.headers.get(TOKEN_HEADER)
        if not token:
            raise APIError(502, "Login response carried no token")

        data = response.json()["data"]
        return LoginResult(
            token=token,
            name=data["name"],
            email=data["email"],
            message=data["message"],
        )

    async def logout(self, token: str) -> None:
        await self._request("POST", "/users/logout", token=token)

    # =========================================================================
    # Books
    # =========================================================================

    async def list_books(self) -> list[dict]:
        response = await self._request("GET", "/libros")
        return response.json()

    async def search_books(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> list[dict]:
        params = {key: value for key, value in (("title", title), ("author", author)) if value}
        response = await self._request("GET", "/libros/buscar", params=params)
        return response.json()

    async def get_book(self, book_id: str) -> dict:
        response = await self._request("GET", f"/libros/{book_id}")
        return response.json()

    async def create_book(self, token: str, book: dict) -> dict:
        response = await self._request("POST", "/libros", token=token, json=book)
        return response.json()["data"]

    async def update_book(self, token: str, book_id: str, book: dict) -> dict:
        response = await self._request("PUT", f"/libros/{book_id}", token=token, json=book)
        return response.json()

    async def delete_book(self, token: str, book_id: str) -> None:
        await self._request("DELETE", f"/libros/{book_id}", token=token)
