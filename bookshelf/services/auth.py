"""Authentication service for signup, login and password handling."""

import logging

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bookshelf.config import get_settings
from bookshelf.exceptions import AuthError, ConflictError, ServerError, ValidationError
from bookshelf.models.user import User
from bookshelf.schemas.auth import AuthResponse
from bookshelf.services.tokens import TokenService, get_token_service

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

INVALID_CREDENTIALS = "Invalid credentials"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def _require_credentials(email: str | None, password: str | None) -> None:
    if not email or not password:
        raise ValidationError("Email and password are required")


def signup(
    db: Session,
    email: str,
    password: str,
    tokens: TokenService | None = None,
) -> AuthResponse:
    """Register a new user and issue a token for it."""
    _require_credentials(email, password)
    tokens = tokens or get_token_service()

    try:
        if get_user_by_email(db, email) is not None:
            raise ConflictError("Email already in use")

        user = User(email=email, password_hash=get_password_hash(password))
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        raise ConflictError("Email already in use") from None
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create user")
        raise ServerError() from None

    logger.info(f"Created user {user.id}")
    return AuthResponse(id=user.id, email=user.email, token=tokens.issue(user.id))


def login(
    db: Session,
    email: str,
    password: str,
    tokens: TokenService | None = None,
) -> AuthResponse:
    """Authenticate by email and password.

    An unknown email and a wrong password fail identically.
    """
    _require_credentials(email, password)
    tokens = tokens or get_token_service()

    try:
        user = get_user_by_email(db, email)
    except SQLAlchemyError:
        logger.exception("Failed to look up user")
        raise ServerError() from None

    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Rejected login attempt")
        raise AuthError(INVALID_CREDENTIALS)

    logger.info(f"User {user.id} logged in")
    return AuthResponse(id=user.id, email=user.email, token=tokens.issue(user.id))
