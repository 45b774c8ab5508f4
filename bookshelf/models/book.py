"""Book model."""

from sqlalchemy import Column, Date, Float, ForeignKey, String
from sqlalchemy.orm import relationship

from bookshelf.database import Base
from bookshelf.models.mixins import TimestampMixin, UUIDPrimaryKeyMixin


class Book(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Book record in the shared catalog.

    ``user_id`` records who created the book. It is informational only and is
    not used to scope reads or writes.
    """

    __tablename__ = "books"

    title = Column(String(500), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    price = Column(Float, nullable=False)
    rating = Column(Float, nullable=False)
    published_date = Column(Date, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    # Relationships
    owner = relationship("User", backref="books")
