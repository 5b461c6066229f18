"""
Author Model

Represents an author in the catalog.

The book_count column is a materialized counter: it is incremented once
per successful addBook naming the author and is never recomputed on the
write path. The allAuthors listing reports a live count instead (see
catalog.graphql.queries).
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.database import Base

# TYPE_CHECKING is True only during type checking (mypy, IDE)
# This prevents circular imports at runtime while enabling type hints
if TYPE_CHECKING:
    from catalog.models.book import Book
    from catalog.models.image import ImageFile


class Author(Base):
    """
    Author model representing writers in the catalog.

    Table: authors

    Relationships:
    - books: One-to-Many (every Book references exactly one Author)
    - image: Optional portrait stored in the image store

    Indexes:
    - Primary key on id (automatic)
    - name: Unique index, authors are looked up by name

    Example:
        author = Author(name="Jack Swanson", born=1962)
        db.add(author)
        db.commit()
    """

    __tablename__ = "authors"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    # unique=True makes a duplicate insert raise IntegrityError, which the
    # addAuthor mutation reports as DUPLICATE_AUTHOR_NAME
    name: Mapped[str] = mapped_column(
        String(170),
        unique=True,
        index=True,
        nullable=False,
        comment="Author's full name"
    )

    born: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Birth year"
    )

    description: Mapped[str | None] = mapped_column(
        String(600),
        nullable=True,
        comment="Short author biography"
    )

    image_id: Mapped[int | None] = mapped_column(
        ForeignKey("image_files.id", ondelete="SET NULL"),
        nullable=True,
        comment="Portrait in the image store"
    )

    # -------------------------------------------------------------------------
    # Derived Counter
    # -------------------------------------------------------------------------
    book_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Number of books added for this author"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the author record was last updated"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="author",
    )

    image: Mapped[Optional["ImageFile"]] = relationship("ImageFile")

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name='{self.name}', book_count={self.book_count})"
