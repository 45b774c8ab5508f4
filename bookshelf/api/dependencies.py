"""FastAPI dependencies for authentication and services."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from bookshelf.database import get_db
from bookshelf.exceptions import AuthError
from bookshelf.services.catalog_service import CatalogService
from bookshelf.services.tokens import TokenService, get_token_service

security = HTTPBearer(auto_error=False)


def get_current_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> str:
    """Resolve the user id from the bearer token, or reject with 401.

    The resolved id is also stored on ``request.state.user_id``.
    """
    token = credentials.credentials if credentials else None
    user_id = tokens.verify(token)

    if user_id is None:
        raise AuthError("Invalid authentication credentials")

    request.state.user_id = user_id
    return user_id


def get_catalog_service(
    db: Annotated[Session, Depends(get_db)],
) -> CatalogService:
    """Get catalog service with dependencies."""
    return CatalogService(db)
