"""Book catalog API endpoints.

Every route here sits behind the bearer-token gate.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from bookshelf.api.dependencies import get_catalog_service, get_current_user_id
from bookshelf.schemas.book import (
    BookCreate,
    BookFilters,
    BookListResponse,
    BookQuery,
    BookResponse,
    BookUpdate,
)
from bookshelf.services.catalog_service import CatalogService

router = APIRouter(
    prefix="/books",
    tags=["books"],
    dependencies=[Depends(get_current_user_id)],
)


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
def create_book(
    book_data: BookCreate,
    current_user_id: Annotated[str, Depends(get_current_user_id)],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Create a new book owned by the current user."""
    return catalog.create(book_data, current_user_id)


@router.get("", response_model=BookListResponse)
def list_books(
    query: Annotated[BookQuery, Query()],
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """List books matching the filters, one page at a time."""
    books, pagination = catalog.list_books(
        BookFilters.from_query(query),
        page=query.page,
        limit=query.limit,
    )
    return BookListResponse(
        data=[BookResponse.model_validate(book) for book in books],
        pagination=pagination,
    )


@router.get("/{book_id}", response_model=BookResponse)
def get_book(
    book_id: str,
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Get a book by id."""
    return catalog.get(book_id)


@router.put("/{book_id}", response_model=BookResponse)
def update_book(
    book_id: str,
    book_data: BookUpdate,
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Update the supplied fields of a book."""
    return catalog.update(book_id, book_data.to_patch())


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(
    book_id: str,
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    """Permanently delete a book."""
    catalog.delete(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
