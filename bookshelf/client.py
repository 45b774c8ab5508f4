"""HTTP client for the catalog API.

The bearer token lives on an explicit :class:`Session` passed into every
call. A 401 on an authenticated call clears the session's token.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CLIENT_PAGE_SIZE = 6


class ClientError(Exception):
    """Base exception for client-side failures."""


class ApiError(ClientError):
    """The server answered with an error status and message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class SessionExpiredError(ApiError):
    """The server rejected the session's token."""


class ParseError(ClientError):
    """The server's response body could not be understood."""


@dataclass
class Session:
    """Authenticated identity threaded through every outbound call."""

    token: str | None = None
    user_id: str | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def clear(self) -> None:
        self.token = None
        self.user_id = None
        self.email = None

    def headers(self) -> dict[str, str]:
        if self.token is None:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


class BookshelfClient:
    """Client for the auth and book endpoints.

    ``http`` is any ``httpx.Client`` with ``base_url`` pointing at the API.
    """

    def __init__(self, http: httpx.Client):
        self.http = http

    # Auth

    def signup(self, session: Session, email: str, password: str) -> Session:
        """Create an account and store its token on ``session``."""
        data = self._send(None, "POST", "/auth/signup", json={"email": email, "password": password})
        return self._start(session, data)

    def login(self, session: Session, email: str, password: str) -> Session:
        """Log in and store the token on ``session``."""
        data = self._send(None, "POST", "/auth/login", json={"email": email, "password": password})
        return self._start(session, data)

    def logout(self, session: Session) -> None:
        """Forget the session's token. Tokens are not revoked server-side."""
        session.clear()

    # Books

    def list_books(
        self,
        session: Session,
        title: str | None = None,
        author: str | None = None,
        category: str | None = None,
        rating: float | None = None,
        page: int = 1,
        limit: int = CLIENT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Get one page of books as ``{"data": [...], "pagination": {...}}``."""
        params: dict[str, Any] = {}
        if title:
            params["title"] = title
        if author:
            params["author"] = author
        if category:
            params["category"] = category
        if rating is not None:
            params["rating"] = rating
        params["page"] = page
        params["limit"] = limit

        result = self._send(session, "GET", "/books", params=params)
        if not isinstance(result, dict) or not isinstance(result.get("data"), list):
            raise ParseError("Invalid data format received from server")
        result.setdefault("pagination", {"pages": 1})
        return result

    def get_book(self, session: Session, book_id: str) -> dict[str, Any]:
        book = self._send(session, "GET", f"/books/{book_id}")
        return self._require_book(book)

    def create_book(self, session: Session, book: dict[str, Any]) -> dict[str, Any]:
        created = self._send(session, "POST", "/books", json=book)
        return self._require_book(created)

    def update_book(self, session: Session, book_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        updated = self._send(session, "PUT", f"/books/{book_id}", json=changes)
        return self._require_book(updated)

    def delete_book(self, session: Session, book_id: str) -> None:
        self._send(session, "DELETE", f"/books/{book_id}")

    # Internals

    def _send(self, session: Session | None, method: str, url: str, **kwargs: Any) -> Any:
        headers = session.headers() if session is not None else {}
        response = self.http.request(method, url, headers=headers, **kwargs)

        if response.status_code == httpx.codes.UNAUTHORIZED and session is not None:
            session.clear()
            raise SessionExpiredError(response.status_code, "Session expired. Please login again.")

        if response.status_code == httpx.codes.NO_CONTENT:
            return None

        data = self._parse(response)
        if not response.is_success:
            message = data.get("message") if isinstance(data, dict) else None
            raise ApiError(response.status_code, message or f"Request failed: {method} {url}")
        return data

    def _parse(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Failed to parse JSON: {response.text[:200]!r}")
            raise ParseError("Invalid server response. Please try again later.") from e

    def _start(self, session: Session, data: Any) -> Session:
        if not isinstance(data, dict) or not data.get("token"):
            raise ParseError("Invalid authentication response")
        session.token = data["token"]
        session.user_id = data.get("id")
        session.email = data.get("email")
        return session

    def _require_book(self, book: Any) -> dict[str, Any]:
        if not isinstance(book, dict) or not book.get("id"):
            raise ParseError("Invalid book data received")
        return book
