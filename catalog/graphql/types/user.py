"""
GraphQL User Type

Defines the User and Token types. The password hash is never exposed.
"""

import strawberry


@strawberry.type(name="User")
class UserType:
    """
    GraphQL type representing a user account.
    """

    id: strawberry.ID
    username: str
    favorite_genre: str | None = None


@strawberry.type
class Token:
    """
    Response type for the login mutation.

    value holds the signed JWT to send back as "Authorization: bearer <value>".
    """

    value: str
