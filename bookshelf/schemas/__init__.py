"""Pydantic schemas for API requests and responses."""

from bookshelf.schemas.auth import AuthResponse, UserCredentials
from bookshelf.schemas.book import (
    BookCreate,
    BookFilters,
    BookListResponse,
    BookPatch,
    BookQuery,
    BookResponse,
    BookUpdate,
    Pagination,
)

__all__ = [
    "UserCredentials",
    "AuthResponse",
    "BookCreate",
    "BookUpdate",
    "BookPatch",
    "BookQuery",
    "BookFilters",
    "BookResponse",
    "BookListResponse",
    "Pagination",
]
