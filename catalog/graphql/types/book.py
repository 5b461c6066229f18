"""
GraphQL Book Type

Defines the Book type for GraphQL queries.
"""

import strawberry

from catalog.graphql.types.author import AuthorType


@strawberry.type(name="Book")
class BookType:
    """
    GraphQL type representing a book.

    The author is always embedded as a resolved AuthorType; the reference
    stored in the database is resolved when the book is converted (see
    catalog.graphql.queries.book_to_graphql).
    """

    id: strawberry.ID
    title: str
    published: int
    author: AuthorType
    genres: list[str] = strawberry.field(default_factory=list)
    description: str | None = None
    image_id: strawberry.ID | None = None
