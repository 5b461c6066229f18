"""
GraphQL Types Package

Types defined here:
- BookType: Book with its resolved author and genres
- AuthorType: Author with book count
- UserType: Public user information
- Token: Login result
"""

from catalog.graphql.types.author import AuthorType
from catalog.graphql.types.book import BookType
from catalog.graphql.types.user import Token, UserType

__all__ = [
    "AuthorType",
    "BookType",
    "Token",
    "UserType",
]
