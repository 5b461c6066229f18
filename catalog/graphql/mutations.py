"""
GraphQL Mutation Resolvers

Defines all write operations (mutations) for the GraphQL API.

Every catalog mutation follows the same sequence: authenticate, validate,
touch the store, publish events, return the converted entity. Errors that
are already classified (CatalogError) pass through unchanged; database
uniqueness violations become ConflictError; anything else is logged and
wrapped into InternalError.
"""

import logging
from collections.abc import AsyncIterator

import strawberry
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from strawberry.file_uploads import Upload
from strawberry.types import Info

from catalog.errors import (
    AuthenticationError,
    CatalogError,
    ConflictError,
    InternalError,
    NotFoundError,
)
from catalog.graphql.context import GraphQLContext, authenticate_user
from catalog.graphql.queries import author_to_graphql, book_to_graphql, user_to_graphql
from catalog.graphql.types.author import AuthorType
from catalog.graphql.types.book import BookType
from catalog.graphql.types.user import Token, UserType
from catalog.models import Author, Book, User
from catalog.services.authors import find_or_increment_author, get_author_by_name
from catalog.services.events import EventType
from catalog.services.security import (
    create_user_token,
    hash_password,
    require_jwt_secret,
    verify_password,
)
from catalog.services.validation import (
    validate_add_author,
    validate_add_book,
    validate_create_user,
    validate_edit_author,
    validate_image_upload,
)

logger = logging.getLogger(__name__)

UPLOAD_READ_SIZE = 64 * 1024


def internal_error(db: Session, action: str, exc: Exception) -> InternalError:
    """Roll back, log, and wrap an unclassified failure."""
    db.rollback()
    logger.error(f"{action} failed: {exc}", exc_info=True)
    return InternalError(f"{action} failed", code="INTERNAL_SERVER_ERROR")


async def read_upload(upload: Upload, size: int = UPLOAD_READ_SIZE) -> AsyncIterator[bytes]:
    """Yield an uploaded file's bytes in pieces until it is exhausted."""
    while True:
        data = await upload.read(size)
        if not data:
            break
        yield data


async def store_upload(info: Info[GraphQLContext, None], file: Upload) -> int:
    """
    Stream an already validated upload into the image store.

    Returns:
        ID of the stored image
    """
    db = info.context.db
    try:
        image = await info.context.image_store.upload(
            db,
            filename=file.filename or "upload",
            content_type=file.content_type,
            source=read_upload(file),
        )
    except CatalogError:
        raise
    except Exception as e:
        raise internal_error(db, "Image upload", e) from e

    return image.id


def attach_image(
    info: Info[GraphQLContext, None],
    entity: Author | Book,
    image_id: int,
    action: str,
) -> None:
    """
    Point a book or author at a stored image.

    If the update fails the image is deleted again, so a failed upload
    never leaves an image nothing refers to.
    """
    db = info.context.db
    try:
        entity.image_id = image_id
        db.commit()
    except Exception as e:
        error = internal_error(db, action, e)
        try:
            info.context.image_store.delete(db, image_id)
        except CatalogError as cleanup_error:
            logger.error(f"Image {image_id} left without an owner: {cleanup_error}")
        raise error from e


@strawberry.type
class Mutation:
    """
    GraphQL Mutation type containing all write operations.

    Catalog mutations require authentication via a bearer token;
    createUser and login do not.
    """

    # =========================================================================
    # Book Mutations
    # =========================================================================

    @strawberry.mutation(description="Add a book, creating its author if needed")
    async def add_book(
        self,
        info: Info[GraphQLContext, None],
        title: str,
        author: str,
        published: int,
        genres: list[str],
        description: str | None = None,
    ) -> BookType:
        """
        Add a new book.

        Requires authentication. The author's stored bookCount is
        incremented before the book is inserted and stays incremented if
        the insert fails.
        """
        user = authenticate_user(info.context)
        validate_add_book(author, title, published, genres, description)
        db = info.context.db

        try:
            author_row = find_or_increment_author(db, author)
        except Exception as e:
            raise internal_error(db, "Resolving author", e) from e

        try:
            book = Book(
                title=title,
                published=published,
                author=author_row,
                # Repeated genres collapse into one
                genres=list(dict.fromkeys(genres)),
                description=description,
            )
            db.add(book)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.info(f"Duplicate book title rejected: '{title}'")
            raise ConflictError(
                f"A book titled '{title}' already exists",
                code="DUPLICATE_BOOK_TITLE",
                invalidArgs=title,
            ) from e
        except Exception as e:
            raise internal_error(db, "Creating book", e) from e

        logger.info(f"User '{user.username}' added book '{title}' by '{author}'")

        result = book_to_graphql(book)
        await info.context.event_bus.publish(EventType.AUTHOR_UPDATED, result.author)
        await info.context.event_bus.publish(EventType.BOOK_ADDED, result)
        return result

    @strawberry.mutation(description="Attach a cover image to a book")
    async def upload_book_image(
        self,
        info: Info[GraphQLContext, None],
        title: str,
        file: Upload,
    ) -> BookType:
        """
        Store an uploaded image and attach it to the book with this title.

        Requires authentication.
        """
        authenticate_user(info.context)
        validate_image_upload(file.content_type)
        db = info.context.db

        book = db.execute(select(Book).where(Book.title == title)).scalar_one_or_none()
        if book is None:
            raise NotFoundError(f"Book '{title}' not found", code="BOOK_NOT_FOUND")

        image_id = await store_upload(info, file)

        attach_image(info, book, image_id, "Attaching book image")

        return book_to_graphql(book)

    # =========================================================================
    # Author Mutations
    # =========================================================================

    @strawberry.mutation(description="Create a new author")
    async def add_author(
        self,
        info: Info[GraphQLContext, None],
        name: str,
        born: int | None = None,
        description: str | None = None,
    ) -> AuthorType:
        """
        Create a new author with no books.

        Requires authentication.
        """
        authenticate_user(info.context)
        validate_add_author(name, born, description)
        db = info.context.db

        try:
            author = Author(name=name, born=born, description=description, book_count=0)
            db.add(author)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(
                f"An author named '{name}' already exists",
                code="DUPLICATE_AUTHOR_NAME",
                invalidArgs=name,
            ) from e
        except Exception as e:
            raise internal_error(db, "Creating author", e) from e

        logger.info(f"Author '{name}' created")

        result = author_to_graphql(author)
        await info.context.event_bus.publish(EventType.AUTHOR_ADDED, result)
        return result

    @strawberry.mutation(description="Set an author's birth year")
    async def edit_author(
        self,
        info: Info[GraphQLContext, None],
        name: str,
        set_born_to: int | None = None,
    ) -> AuthorType:
        """
        Update an existing author's birth year.

        Requires authentication. The birth year is validated before the
        author is looked up.
        """
        authenticate_user(info.context)
        validate_edit_author(set_born_to)
        db = info.context.db

        try:
            author = get_author_by_name(db, name)
            if author is not None:
                author.born = set_born_to
                db.commit()
                db.refresh(author)
        except Exception as e:
            raise internal_error(db, "Editing author", e) from e

        if author is None:
            raise NotFoundError(
                f"Author '{name}' not found",
                code="AUTHOR_NOT_FOUND",
                invalidArgs=name,
            )

        logger.info(f"Author '{name}' born set to {set_born_to}")

        result = author_to_graphql(author)
        await info.context.event_bus.publish(EventType.AUTHOR_UPDATED, result)
        return result

    @strawberry.mutation(description="Attach a portrait image to an author")
    async def upload_author_image(
        self,
        info: Info[GraphQLContext, None],
        name: str,
        file: Upload,
    ) -> AuthorType:
        """
        Store an uploaded image and attach it to the author with this name.

        Requires authentication.
        """
        authenticate_user(info.context)
        validate_image_upload(file.content_type)
        db = info.context.db

        author = get_author_by_name(db, name)
        if author is None:
            raise NotFoundError(f"Author '{name}' not found", code="AUTHOR_NOT_FOUND")

        image_id = await store_upload(info, file)

        attach_image(info, author, image_id, "Attaching author image")

        result = author_to_graphql(author)
        await info.context.event_bus.publish(EventType.AUTHOR_UPDATED, result)
        return result

    # =========================================================================
    # Authentication Mutations
    # =========================================================================

    @strawberry.mutation(description="Register a new user account")
    async def create_user(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
        favorite_genre: str | None = None,
    ) -> UserType:
        """
        Create a new user account.

        The password is hashed with bcrypt in a worker thread.
        """
        validate_create_user(username, favorite_genre)
        db = info.context.db

        password_hash = await run_in_threadpool(hash_password, password)

        try:
            user = User(
                username=username,
                favorite_genre=favorite_genre,
                password_hash=password_hash,
            )
            db.add(user)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(
                f"Username '{username}' is already taken",
                code="DUPLICATE_USERNAME",
                invalidArgs=username,
            ) from e
        except Exception as e:
            raise internal_error(db, "Creating user", e) from e

        logger.info(f"User '{username}' created")
        return user_to_graphql(user)

    @strawberry.mutation(description="Login with username and password")
    async def login(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
    ) -> Token:
        """
        Authenticate with username and password.

        An unknown username and a wrong password are reported the same
        way, so callers cannot tell which one happened.
        """
        require_jwt_secret()
        db = info.context.db

        user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()

        password_ok = user is not None and await run_in_threadpool(
            verify_password, password, user.password_hash
        )
        if not password_ok:
            logger.info(f"Failed login for '{username}'")
            raise AuthenticationError(
                "Wrong credentials",
                code="WRONG_CREDENTIALS",
            )

        return Token(value=create_user_token(user.id, user.username))
