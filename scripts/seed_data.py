#!/usr/bin/env python3
"""
Database Seed Script

Loads a small catalog for local development.

USAGE:
    # From the project root with the package installed
    python scripts/seed_data.py

Books are inserted through find_or_increment_author(), the same path the
addBook mutation uses, so every author's stored bookCount matches the
number of seeded books. A demo user is created so the mutations can be
tried from GraphiQL right away.
"""

from sqlalchemy.orm import Session

from catalog.database import SessionLocal, clear_tables, create_tables
from catalog.models import Book, User
from catalog.services.authors import find_or_increment_author
from catalog.services.security import hash_password

DEMO_USERNAME = "demoUser"
DEMO_PASSWORD = "demoPassword"

BOOKS = [
    {
        "title": "Oddly Normal",
        "author": "Jack Swanson",
        "published": 2010,
        "genres": ["Fantasy", "Horror"],
    },
    {
        "title": "Even Stranger",
        "author": "Jack Swanson",
        "published": 2011,
        "genres": ["Fantasy", "Horror"],
    },
    {
        "title": "The Oddest",
        "author": "Jack Swanson",
        "published": 2012,
        "genres": ["Fantasy", "Horror"],
    },
    {
        "title": "Swamp Thing",
        "author": "Alan Moore",
        "published": 1984,
        "genres": ["Horror", "Sci-Fi"],
    },
    {
        "title": "The great amazonian jungle",
        "author": "Jack Swanson",
        "published": 2015,
        "genres": ["Nature", "Adventure"],
    },
]


def create_books(db: Session) -> list[Book]:
    """Insert the sample books, creating their authors on the way."""
    print("Creating books...")
    books = []
    for data in BOOKS:
        author = find_or_increment_author(db, data["author"])
        book = Book(
            title=data["title"],
            published=data["published"],
            author=author,
            genres=data["genres"],
        )
        db.add(book)
        db.commit()
        books.append(book)

    print(f"Created {len(books)} books.")
    return books


def create_demo_user(db: Session) -> User:
    """Create the login used to try mutations."""
    user = User(
        username=DEMO_USERNAME,
        password_hash=hash_password(DEMO_PASSWORD),
        favorite_genre="Horror",
    )
    db.add(user)
    db.commit()
    print(f"Created user '{DEMO_USERNAME}' (password '{DEMO_PASSWORD}').")
    return user


def seed_database(clear_existing: bool = True) -> None:
    """
    Seed the database with the sample catalog.

    Args:
        clear_existing: If True, empties every table first.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    create_tables()
    db = SessionLocal()

    try:
        if clear_existing:
            print("Clearing existing data...")
            clear_tables(db)

        books = create_books(db)
        create_demo_user(db)

        print("=" * 60)
        print(f"Seeded {len(books)} books. GraphQL endpoint: http://localhost:4000/graphql")
        print("=" * 60)
    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
