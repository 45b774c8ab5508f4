#!/usr/bin/env python3
"""Seed demo users and books.

Re-running the script clears the demo users and their books first.

Usage:
    DATABASE_URL=sqlite:///./bookshelf.db python scripts/seed_demo_data.py
"""

import os
import sys
from datetime import date

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bookshelf.config import get_settings
from bookshelf.database import Base
from bookshelf.models import Book, User
from bookshelf.services.auth import get_password_hash

DATABASE_URL = os.getenv("DATABASE_URL", get_settings().database_url)

DEMO_USERS = {
    "reader@example.com": "readerpass",
    "abcd@example.com": "abcd",
    "bob@example.com": "bob",
}

DEMO_BOOKS = [
    {
        "owner": "reader@example.com",
        "title": "The Alchemist",
        "author": "Paulo Coelho",
        "category": "Fiction",
        "price": 299,
        "rating": 4.5,
        "published_date": date(1988, 1, 1),
    },
    {
        "owner": "reader@example.com",
        "title": "Rich Dad Poor Dad",
        "author": "Robert Kiyosaki",
        "category": "Finance",
        "price": 399,
        "rating": 4.3,
        "published_date": date(1997, 4, 1),
    },
    {
        "owner": "abcd@example.com",
        "title": "Atomic Habits",
        "author": "James Clear",
        "category": "Self-Help",
        "price": 449,
        "rating": 4.8,
        "published_date": date(2018, 10, 16),
    },
    {
        "owner": "bob@example.com",
        "title": "Clean Code",
        "author": "Robert C. Martin",
        "category": "Programming",
        "price": 599,
        "rating": 4.7,
        "published_date": date(2008, 8, 1),
    },
]


def seed_demo_data():
    """Seed the database with demo users and their books."""
    engine = create_engine(DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    try:
        existing_users = session.query(User).filter(User.email.in_(DEMO_USERS)).all()
        if existing_users:
            print("Demo data already exists. Clearing and re-seeding...")
            existing_ids = [user.id for user in existing_users]
            session.query(Book).filter(Book.user_id.in_(existing_ids)).delete(
                synchronize_session=False
            )
            for user in existing_users:
                session.delete(user)
            session.commit()

        print("Creating demo users...")
        users = {
            email: User(email=email, password_hash=get_password_hash(password))
            for email, password in DEMO_USERS.items()
        }
        session.add_all(users.values())
        session.flush()

        print("Creating demo books...")
        session.add_all(
            Book(user_id=users[book["owner"]].id, **{k: v for k, v in book.items() if k != "owner"})
            for book in DEMO_BOOKS
        )

        session.commit()
        print("Demo data seeded successfully!")

    except Exception as e:
        session.rollback()
        print(f"Error seeding demo data: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    seed_demo_data()
