"""
GraphQL Query Resolvers

Defines all read operations (queries) for the GraphQL API, plus the
converters that turn SQLAlchemy models into GraphQL types.
"""

import logging

import strawberry
from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload
from strawberry.types import Info

from catalog.graphql.context import GraphQLContext
from catalog.graphql.types.author import AuthorType
from catalog.graphql.types.book import BookType
from catalog.graphql.types.user import UserType
from catalog.models import Author, Book, BookGenre, User
from catalog.services.authors import get_author_by_name, live_book_counts

logger = logging.getLogger(__name__)


def author_to_graphql(author: Author, book_count: int | None = None) -> AuthorType:
    """
    Convert SQLAlchemy Author model to GraphQL AuthorType.

    book_count defaults to the stored counter; pass a value to report a
    live count instead.
    """
    return AuthorType(
        id=strawberry.ID(str(author.id)),
        name=author.name,
        born=author.born,
        description=author.description,
        book_count=author.book_count if book_count is None else book_count,
        image_id=strawberry.ID(str(author.image_id)) if author.image_id else None,
    )


def book_to_graphql(book: Book) -> BookType:
    """
    Convert SQLAlchemy Book model to GraphQL BookType.

    The author reference is always resolved through the book.author
    relationship, whether the book was just created in this session or
    loaded from the database.
    """
    return BookType(
        id=strawberry.ID(str(book.id)),
        title=book.title,
        published=book.published,
        author=author_to_graphql(book.author),
        genres=list(book.genres),
        description=book.description,
        image_id=strawberry.ID(str(book.image_id)) if book.image_id else None,
    )


def user_to_graphql(user: User) -> UserType:
    """Convert SQLAlchemy User model to GraphQL UserType."""
    return UserType(
        id=strawberry.ID(str(user.id)),
        username=user.username,
        favorite_genre=user.favorite_genre,
    )


def find_books(db: Session, author: str | None = None, genre: str | None = None) -> list[Book]:
    """
    Select books by author name, genre, both or neither.

    An unknown author gives an empty list rather than an error. Results
    come back in the store's natural order.
    """
    stmt = select(Book).options(selectinload(Book.author))

    if author:
        author_row = get_author_by_name(db, author)
        if author_row is None:
            return []
        stmt = stmt.where(Book.author_id == author_row.id)

    if genre:
        stmt = stmt.where(Book.genre_rows.any(BookGenre.genre == genre))

    return list(db.execute(stmt).scalars().all())


@strawberry.type
class Query:
    """
    GraphQL Query type containing all read operations.

    All resolvers receive an `info` parameter that contains the
    GraphQL context with database session and current user.
    """

    @strawberry.field(description="Total number of books")
    def book_count(self, info: Info[GraphQLContext, None]) -> int:
        db = info.context.db
        return db.execute(select(func.count(Book.id))).scalar() or 0

    @strawberry.field(description="Total number of authors")
    def author_count(self, info: Info[GraphQLContext, None]) -> int:
        db = info.context.db
        return db.execute(select(func.count(Author.id))).scalar() or 0

    @strawberry.field(description="List books, optionally filtered by author name and/or genre")
    def all_books(
        self,
        info: Info[GraphQLContext, None],
        author: str | None = None,
        genre: str | None = None,
    ) -> list[BookType]:
        """
        Get books with optional filtering.

        Args:
            author: Exact author name
            genre: Genre the book must carry

        Returns:
            Matching books (empty when the author is unknown)
        """
        books = find_books(info.context.db, author=author, genre=genre)
        return [book_to_graphql(b) for b in books]

    @strawberry.field(description="List all authors with live book counts")
    def all_authors(self, info: Info[GraphQLContext, None]) -> list[AuthorType]:
        """
        Get every author.

        bookCount here is counted from the books table at query time,
        independent of the stored counter maintained by addBook.
        """
        db = info.context.db
        authors = db.execute(select(Author).order_by(Author.id)).scalars().all()
        counts = live_book_counts(db)
        return [author_to_graphql(a, book_count=counts.get(a.id, 0)) for a in authors]

    @strawberry.field(description="Distinct genres across all books")
    def all_genres(self, info: Info[GraphQLContext, None]) -> list[str]:
        """Order is whatever the store's DISTINCT returns."""
        db = info.context.db
        return list(db.execute(select(BookGenre.genre).distinct()).scalars().all())

    @strawberry.field(description="Get a single book by title")
    def find_book(self, info: Info[GraphQLContext, None], title: str) -> BookType | None:
        db = info.context.db
        stmt = select(Book).options(selectinload(Book.author)).where(Book.title == title)
        book = db.execute(stmt).scalar_one_or_none()
        return book_to_graphql(book) if book else None

    @strawberry.field(description="Get a single author by name")
    def find_author(self, info: Info[GraphQLContext, None], name: str) -> AuthorType | None:
        author = get_author_by_name(info.context.db, name)
        return author_to_graphql(author) if author else None

    @strawberry.field(description="Get the currently authenticated user")
    def me(self, info: Info[GraphQLContext, None]) -> UserType | None:
        """
        Get the current user's profile.

        Returns None for anonymous requests.
        """
        user = info.context.current_user
        return user_to_graphql(user) if user else None
