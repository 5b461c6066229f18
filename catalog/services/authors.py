"""
Author Resolution Service

find_or_increment_author() is the only code path that changes an author's
stored book_count. It is called exactly once per addBook.

CONSISTENCY NOTE:
=================
The increment is committed on its own, before the book insert. If the
insert then fails (for example on a duplicate title) the counter is not
rolled back. Two concurrent addBook calls for the same author can also
both read the same counter value before either commits, losing one
increment. Both windows are accepted; the allAuthors listing reports a
live count that is unaffected by them.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog.models.author import Author
from catalog.models.book import Book

logger = logging.getLogger(__name__)


def get_author_by_name(db: Session, name: str) -> Author | None:
    """Find an author by exact name."""
    stmt = select(Author).where(Author.name == name)
    return db.execute(stmt).scalar_one_or_none()


def find_or_increment_author(db: Session, name: str) -> Author:
    """
    Return the author called `name`, creating it if needed, with its
    book_count incremented by one.

    Algorithm:
    1. Look up the author by name
    2. If absent, create it with book_count = 0
    3. Increment book_count by 1
    4. Commit and return the persisted author

    Raises:
        sqlalchemy.exc.SQLAlchemyError: On store failure (the caller
            classifies it)
    """
    author = get_author_by_name(db, name)

    if author is None:
        logger.info(f"Author '{name}' not found, creating it")
        author = Author(name=name, book_count=0)
        db.add(author)

    author.book_count = (author.book_count or 0) + 1

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(author)
    return author


def live_book_counts(db: Session) -> dict[int, int]:
    """
    Count books per author straight from the books table.

    Authors without books are absent from the result.
    """
    stmt = select(Book.author_id, func.count(Book.id)).group_by(Book.author_id)
    return {author_id: count for author_id, count in db.execute(stmt).all()}
