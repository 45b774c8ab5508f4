"""Book schemas.

Request and response bodies use camelCase keys (``publishedDate``,
``userId``); snake_case names are accepted on input as well.
"""

from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


class _Unset:
    """Marker for a patch field that was not supplied."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

_datetime_adapter = TypeAdapter(datetime)


def _date_part(value: Any) -> Any:
    """Reduce a datetime, or an ISO datetime string, to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value.strip()) > 10:
        try:
            return _datetime_adapter.validate_python(value.strip()).date()
        except PydanticValidationError:
            return value
    return value


class BookSchema(BaseModel):
    """Base for book schemas with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class BookCreate(BookSchema):
    """Create a new book. Every field is required."""

    title: str = Field(..., min_length=1, max_length=500)
    author: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0, allow_inf_nan=False)
    rating: float = Field(..., ge=0, le=5, allow_inf_nan=False)
    published_date: date

    published_date_part = field_validator("published_date", mode="before")(_date_part)


class BookUpdate(BookSchema):
    """Update a book. Only the supplied keys are applied."""

    title: str | None = Field(None, min_length=1, max_length=500)
    author: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, min_length=1, max_length=100)
    price: float | None = Field(None, ge=0, allow_inf_nan=False)
    rating: float | None = Field(None, ge=0, le=5, allow_inf_nan=False)
    published_date: date | None = None

    published_date_part = field_validator("published_date", mode="before")(_date_part)

    def to_patch(self) -> "BookPatch":
        """Convert to a patch, keeping absent and explicit-null apart."""
        return BookPatch(**{name: getattr(self, name) for name in self.model_fields_set})


@dataclass(frozen=True)
class BookPatch:
    """Partial change to a book.

    Each field is either ``UNSET`` (leave as is), ``None`` (explicit null) or
    a value.
    """

    title: str | None = UNSET
    author: str | None = UNSET
    category: str | None = UNSET
    price: float | None = UNSET
    rating: float | None = UNSET
    published_date: date | None = UNSET

    def present(self) -> dict[str, Any]:
        """Return the supplied fields, including explicit nulls."""
        return {
            field.name: getattr(self, field.name)
            for field in fields(self)
            if getattr(self, field.name) is not UNSET
        }


class BookQuery(BaseModel):
    """Query parameters for listing books. Empty filters count as absent."""

    title: str | None = None
    author: str | None = None
    category: str | None = None
    rating: float | None = Field(None, allow_inf_nan=False)
    page: int | None = None
    limit: int | None = None

    @field_validator("title", "author", "category", "rating", "page", "limit", mode="before")
    @classmethod
    def blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


@dataclass(frozen=True)
class BookFilters:
    """Filter predicates for a list query, combined with AND."""

    title: str | None = None
    author: str | None = None
    category: str | None = None
    min_rating: float | None = None

    @classmethod
    def from_query(cls, query: BookQuery) -> "BookFilters":
        return cls(
            title=query.title,
            author=query.author,
            category=query.category,
            min_rating=query.rating,
        )


class BookResponse(BookSchema):
    """Book response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    author: str
    category: str
    price: float
    rating: float
    published_date: date
    user_id: str | None
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    """Pagination metadata for a list query."""

    total: int
    page: int
    limit: int
    pages: int


class BookListResponse(BaseModel):
    """A page of books with pagination metadata."""

    data: list[BookResponse]
    pagination: Pagination
