"""
Validation Service

Pure functions that check mutation arguments before anything touches the
database. Rules are evaluated in order and the first violation wins; each
violation raises ValidationError with a stable code.

Usage:
    from catalog.services.validation import validate_add_book

    validate_add_book(author="Jack Swanson", title="Oddly Normal",
                      published=2010, genres=["Fantasy"])
"""

from collections.abc import Sequence

from catalog.errors import ValidationError

# -------------------------------------------------------------------------
# Field Limits
# -------------------------------------------------------------------------
AUTHOR_NAME_MIN = 4
AUTHOR_NAME_MAX = 170
AUTHOR_DESCRIPTION_MAX = 600

BOOK_TITLE_MIN = 2
BOOK_TITLE_MAX = 150
BOOK_GENRES_MIN = 1
BOOK_GENRES_MAX = 3
BOOK_DESCRIPTION_MAX = 1600

USERNAME_MIN = 3
USERNAME_MAX = 30
FAVORITE_GENRE_MIN = 2
FAVORITE_GENRE_MAX = 30


def validate_add_book(
    author: str,
    title: str,
    published: int,
    genres: Sequence[str],
    description: str | None = None,
) -> None:
    """
    Validate addBook arguments.

    Raises:
        ValidationError: BAD_AUTHOR_NAME, BAD_BOOK_TITLE, BAD_BOOK_GENRES,
            BAD_BOOK_PUBLICATION_DATE or BAD_BOOK_DESCRIPTION
    """
    if not AUTHOR_NAME_MIN <= len(author) <= AUTHOR_NAME_MAX:
        raise ValidationError(
            f"Author name must be between {AUTHOR_NAME_MIN} and {AUTHOR_NAME_MAX} characters",
            code="BAD_AUTHOR_NAME",
        )

    if not BOOK_TITLE_MIN <= len(title) <= BOOK_TITLE_MAX:
        raise ValidationError(
            f"Book title must be between {BOOK_TITLE_MIN} and {BOOK_TITLE_MAX} characters",
            code="BAD_BOOK_TITLE",
        )

    if not BOOK_GENRES_MIN <= len(genres) <= BOOK_GENRES_MAX:
        raise ValidationError(
            f"A book must have between {BOOK_GENRES_MIN} and {BOOK_GENRES_MAX} genres",
            code="BAD_BOOK_GENRES",
        )

    if published < 0:
        raise ValidationError(
            "Publication year cannot be negative",
            code="BAD_BOOK_PUBLICATION_DATE",
        )

    if description is not None and len(description) > BOOK_DESCRIPTION_MAX:
        raise ValidationError(
            f"Book description cannot exceed {BOOK_DESCRIPTION_MAX} characters",
            code="BAD_BOOK_DESCRIPTION",
        )


def validate_add_author(
    name: str,
    born: int | None = None,
    description: str | None = None,
) -> None:
    """
    Validate addAuthor arguments.

    Raises:
        ValidationError: BAD_AUTHOR_NAME, BAD_AUTHOR_BIRTH_YEAR or
            BAD_AUTHOR_DESCRIPTION
    """
    if not AUTHOR_NAME_MIN <= len(name) <= AUTHOR_NAME_MAX:
        raise ValidationError(
            f"Author name must be between {AUTHOR_NAME_MIN} and {AUTHOR_NAME_MAX} characters",
            code="BAD_AUTHOR_NAME",
        )

    if born is not None and born < 0:
        raise ValidationError(
            "Birth year cannot be negative",
            code="BAD_AUTHOR_BIRTH_YEAR",
        )

    if description is not None and len(description) > AUTHOR_DESCRIPTION_MAX:
        raise ValidationError(
            f"Author description cannot exceed {AUTHOR_DESCRIPTION_MAX} characters",
            code="BAD_AUTHOR_DESCRIPTION",
        )


def validate_edit_author(set_born_to: int | None) -> None:
    """
    Validate the editAuthor birth year.

    The presence check is a truthiness check, so 0 is reported as
    BAD_USER_INPUT rather than accepted.

    Raises:
        ValidationError: BAD_USER_INPUT or BAD_AUTHOR_BIRTH_YEAR
    """
    if not set_born_to:
        raise ValidationError(
            "setBornTo is required",
            code="BAD_USER_INPUT",
        )

    if set_born_to < 0:
        raise ValidationError(
            "Birth year cannot be negative",
            code="BAD_AUTHOR_BIRTH_YEAR",
        )


def validate_create_user(username: str, favorite_genre: str | None = None) -> None:
    """
    Validate createUser arguments.

    Raises:
        ValidationError: BAD_USERNAME or BAD_FAVORITE_GENRE
    """
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        raise ValidationError(
            f"Username must be between {USERNAME_MIN} and {USERNAME_MAX} characters",
            code="BAD_USERNAME",
            invalidArgs=username,
        )

    if favorite_genre is not None and not (
        FAVORITE_GENRE_MIN <= len(favorite_genre) <= FAVORITE_GENRE_MAX
    ):
        raise ValidationError(
            f"Favorite genre must be between {FAVORITE_GENRE_MIN} and "
            f"{FAVORITE_GENRE_MAX} characters",
            code="BAD_FAVORITE_GENRE",
        )


def validate_image_upload(content_type: str | None) -> None:
    """
    Only image/* uploads are accepted.

    Raises:
        ValidationError: BAD_FILE_TYPE
    """
    if not content_type or not content_type.startswith("image"):
        raise ValidationError(
            f"Unsupported file type: {content_type or 'unknown'}",
            code="BAD_FILE_TYPE",
        )
