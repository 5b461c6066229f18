"""
Catalog Error Types

Every error a resolver reports carries a stable machine-readable code plus
a human-readable message. The code is exposed to clients as
errors[].extensions.code in the GraphQL response: graphql-core copies the
`extensions` attribute of the original exception onto the GraphQL error
it builds.

Taxonomy:
- ValidationError: bad shape/range on mutation arguments
- AuthenticationError: missing or invalid session / credentials
- NotFoundError: referenced entity does not exist
- ConflictError: uniqueness violation on name, title or username
- ConfigurationError: required server setting is missing
- InternalError: unexpected store or stream failure

Codes are part of the public contract and must not change.
"""

from typing import Any


class CatalogError(Exception):
    """
    Base class for classified catalog errors.

    Outer handlers re-raise CatalogError instances unchanged; only
    unclassified exceptions are wrapped into InternalError.
    """

    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        **extra: Any,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.extensions: dict[str, Any] = {"code": self.code, **extra}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(CatalogError):
    """Raised when mutation arguments violate a domain rule."""

    default_code = "BAD_USER_INPUT"


class AuthenticationError(CatalogError):
    """Raised when authentication is required but missing or wrong."""

    default_code = "UNAUTHENTICATED_USER"


class NotFoundError(CatalogError):
    """Raised when a referenced entity does not exist."""

    default_code = "NOT_FOUND"


class ConflictError(CatalogError):
    """Raised on a uniqueness violation."""

    default_code = "CONFLICT"


class ConfigurationError(CatalogError):
    """Raised when the server is missing a required setting."""

    default_code = "SERVER_MISCONFIGURED"


class InternalError(CatalogError):
    """Raised for unexpected store or stream failures."""

    default_code = "INTERNAL_SERVER_ERROR"
