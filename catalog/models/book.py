"""
Book Model

The central model of the catalog.

This file also contains the BookGenre model. Genres are free-form strings
rather than rows of their own, so each Book keeps its 1-3 genres as child
rows in book_genres. That keeps genre filtering a plain join and lets
allGenres use SELECT DISTINCT.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.database import Base

if TYPE_CHECKING:
    from catalog.models.author import Author
    from catalog.models.image import ImageFile


class BookGenre(Base):
    """
    A single genre label attached to a book.

    Table: book_genres

    The composite primary key (book_id, genre) stops the same genre from
    being stored twice for one book.
    """

    __tablename__ = "book_genres"

    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    )
    genre: Mapped[str] = mapped_column(
        Text,
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"BookGenre(book_id={self.book_id}, genre='{self.genre}')"


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title: Book title (unique)
    - published: Publication year
    - author_id: Reference to the author at rest
    - genres: 1-3 genre strings (proxied through book_genres rows)
    - description: Optional summary
    - image_id: Optional cover in the image store

    Example:
        book = Book(
            title="Oddly Normal",
            published=2010,
            author=author,
            genres=["Fantasy", "Horror"],
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    # A duplicate title raises IntegrityError on flush; addBook reports it
    # as DUPLICATE_BOOK_TITLE
    title: Mapped[str] = mapped_column(
        String(150),
        unique=True,
        index=True,
        nullable=False,
        comment="Book title"
    )

    published: Mapped[int] = mapped_column(
        Integer,
        index=True,
        nullable=False,
        comment="Publication year"
    )

    description: Mapped[str | None] = mapped_column(
        String(1600),
        nullable=True,
        comment="Book description or summary"
    )

    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id"),
        index=True,
        nullable=False,
        comment="Author of the book"
    )

    image_id: Mapped[int | None] = mapped_column(
        ForeignKey("image_files.id", ondelete="SET NULL"),
        nullable=True,
        comment="Cover image in the image store"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    author: Mapped["Author"] = relationship(
        "Author",
        back_populates="books",
    )

    # selectin loading fetches genre rows for a whole result list in one
    # extra query instead of one query per book
    genre_rows: Mapped[list[BookGenre]] = relationship(
        BookGenre,
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # book.genres reads and writes plain strings:
    #   book.genres = ["Fantasy", "Horror"]
    genres: AssociationProxy[list[str]] = association_proxy(
        "genre_rows",
        "genre",
        creator=lambda genre: BookGenre(genre=genre),
    )

    image: Mapped[Optional["ImageFile"]] = relationship("ImageFile")

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', published={self.published})"
