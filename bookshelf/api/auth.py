"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bookshelf.database import get_db
from bookshelf.schemas.auth import AuthResponse, UserCredentials
from bookshelf.services import auth as auth_service
from bookshelf.services.tokens import TokenService, get_token_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    credentials: UserCredentials,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    """Register a new user."""
    return auth_service.signup(db, credentials.email, credentials.password, tokens)


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserCredentials,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    """Login with email and password."""
    return auth_service.login(db, credentials.email, credentials.password, tokens)
