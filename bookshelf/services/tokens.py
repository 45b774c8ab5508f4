"""Signed, time-limited bearer tokens."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from bookshelf.config import get_settings

logger = logging.getLogger(__name__)


class TokenService:
    """Issue and verify JWT access tokens carrying a user id."""

    def __init__(
        self,
        secret: str | None = None,
        algorithm: str | None = None,
        expiration_minutes: int | None = None,
    ) -> None:
        settings = get_settings()
        self.secret = secret or settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.lifetime = timedelta(minutes=expiration_minutes or settings.jwt_expiration_minutes)

    def issue(self, user_id: str, now: datetime | None = None) -> str:
        """Create a token for ``user_id`` that expires one lifetime after ``now``."""
        issued_at = now or datetime.now(UTC)
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str | None) -> str | None:
        """Return the user id in a valid token, or None.

        Missing, malformed, badly signed, expired and subject-less tokens all
        yield None.
        """
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"Rejected token: {e}")
            return None
        user_id = payload.get("sub")
        if not user_id:
            return None
        return str(user_id)


def get_token_service() -> TokenService:
    """Get a token service configured from settings."""
    return TokenService()
