"""Catalog service for book CRUD, filtering and pagination."""

import logging
import math
from typing import NoReturn

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session
from sqlalchemy.orm.exc import ObjectDeletedError, StaleDataError

from bookshelf.config import get_settings
from bookshelf.exceptions import NotFound, ServerError, ValidationError
from bookshelf.models.book import Book
from bookshelf.schemas.book import BookCreate, BookFilters, BookPatch, Pagination

logger = logging.getLogger(__name__)

BOOK_NOT_FOUND = "Book not found"

# Columns that must never be set to null by an update
REQUIRED_FIELDS = ("title", "author", "category", "price", "rating", "published_date")

# Largest OFFSET or LIMIT the database accepts (signed 64-bit)
MAX_SQL_INTEGER = 2**63 - 1


def _contains(value: str) -> str:
    """Build a LIKE pattern matching ``value`` as a literal substring."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class CatalogService:
    """Service for book catalog operations.

    Books are shared: any authenticated user may read, update or delete any
    book, whoever created it.
    """

    def __init__(self, db: Session):
        self.db = db
        self.default_page_size = get_settings().default_page_size

    def create(self, data: BookCreate, user_id: str | None) -> Book:
        """Create a book owned by ``user_id``."""
        book = Book(
            title=data.title,
            author=data.author,
            category=data.category,
            price=data.price,
            rating=data.rating,
            published_date=data.published_date,
            user_id=user_id,
        )
        try:
            self.db.add(book)
            self.db.commit()
            self.db.refresh(book)
        except SQLAlchemyError:
            self._fail("create book")

        logger.info(f"User {user_id} created book {book.id}")
        return book

    def list_books(
        self,
        filters: BookFilters | None = None,
        page: int | None = 1,
        limit: int | None = None,
    ) -> tuple[list[Book], Pagination]:
        """Return one page of books matching every supplied filter."""
        filters = filters or BookFilters()
        if page is None:
            page = 1
        if limit is None:
            limit = self.default_page_size
        if page < 1:
            raise ValidationError("page must be a positive integer")
        if limit < 1:
            raise ValidationError("limit must be a positive integer")
        if limit > MAX_SQL_INTEGER or (page - 1) * limit > MAX_SQL_INTEGER:
            raise ValidationError("page or limit is too large")
        if filters.min_rating is not None and not math.isfinite(filters.min_rating):
            raise ValidationError("rating must be a number")

        try:
            query = self._apply_filters(self.db.query(Book), filters)
            total = query.count()
            books = (
                query.order_by(Book.created_at, Book.id)
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError:
            self._fail("list books")

        pagination = Pagination(
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit),
        )
        return books, pagination

    def get(self, book_id: str) -> Book:
        """Get a book by id."""
        try:
            book = self.db.query(Book).filter(Book.id == book_id).first()
        except SQLAlchemyError:
            self._fail("load book")

        if book is None:
            raise NotFound(BOOK_NOT_FOUND)
        return book

    def update(self, book_id: str, patch: BookPatch) -> Book:
        """Apply the fields present in ``patch``; absent fields keep their values."""
        changes = patch.present()
        for name in REQUIRED_FIELDS:
            if name in changes and changes[name] is None:
                raise ValidationError(f"{name} cannot be null")

        book = self.get(book_id)
        for name, value in changes.items():
            setattr(book, name, value)

        try:
            self.db.commit()
            self.db.refresh(book)
        except (StaleDataError, ObjectDeletedError):
            self._gone(book_id)
        except SQLAlchemyError:
            self._fail("update book")

        logger.info(f"Updated book {book_id}: {sorted(changes)}")
        return book

    def delete(self, book_id: str) -> None:
        """Permanently delete a book."""
        book = self.get(book_id)
        try:
            self.db.delete(book)
            self.db.commit()
        except (StaleDataError, ObjectDeletedError):
            self._gone(book_id)
        except SQLAlchemyError:
            self._fail("delete book")

        logger.info(f"Deleted book {book_id}")

    def _apply_filters(self, query: Query, filters: BookFilters) -> Query:
        if filters.title:
            query = query.filter(Book.title.ilike(_contains(filters.title), escape="\\"))
        if filters.author:
            query = query.filter(Book.author.ilike(_contains(filters.author), escape="\\"))
        if filters.category:
            query = query.filter(Book.category == filters.category)
        if filters.min_rating is not None:
            query = query.filter(Book.rating >= filters.min_rating)
        return query

    def _fail(self, operation: str) -> NoReturn:
        """Roll back, log the active exception and raise a generic ServerError."""
        self.db.rollback()
        logger.exception(f"Failed to {operation}")
        raise ServerError() from None

    def _gone(self, book_id: str) -> NoReturn:
        """Report a book deleted concurrently as NotFound."""
        self.db.rollback()
        logger.info(f"Book {book_id} disappeared during the request")
        raise NotFound(BOOK_NOT_FOUND) from None
