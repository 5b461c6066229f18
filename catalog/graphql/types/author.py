"""
GraphQL Author Type

Defines the Author type for GraphQL queries.
"""

import strawberry


@strawberry.type(name="Author")
class AuthorType:
    """
    GraphQL type representing a book author.

    Maps to the Author SQLAlchemy model. book_count carries either the
    stored counter or, in the allAuthors listing, a live count.
    """

    id: strawberry.ID
    name: str
    born: int | None = None
    description: str | None = None
    book_count: int | None = None
    image_id: strawberry.ID | None = None
