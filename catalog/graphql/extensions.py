"""
GraphQL Schema Extensions

ClassifyErrors runs after every operation and makes sure each resolver
error reaching the client carries a code. Errors raised as CatalogError
already do; anything else (a failing query against the store, a bug in a
converter) is logged with its traceback and replaced by a generic
InternalError, so SQL text and stack details never leave the server.

Errors without an original exception (syntax and validation errors from
graphql-core itself) are left untouched.
"""

import logging
from collections.abc import Iterator

from graphql import ExecutionResult, GraphQLError
from strawberry.extensions import SchemaExtension

from catalog.errors import CatalogError, InternalError

logger = logging.getLogger(__name__)


class ClassifyErrors(SchemaExtension):
    """Wrap unclassified resolver exceptions into INTERNAL_SERVER_ERROR."""

    def on_operation(self) -> Iterator[None]:
        yield

        result = self.execution_context.result
        if isinstance(result, ExecutionResult) and result.errors:
            result.errors = [self.classify(error) for error in result.errors]

    def classify(self, error: GraphQLError) -> GraphQLError:
        original = error.original_error
        if original is None or isinstance(original, CatalogError):
            return error

        path = ".".join(str(key) for key in error.path or [])
        logger.error(f"Unhandled error in '{path}': {original}", exc_info=original)

        wrapped = InternalError("Internal server error")
        return GraphQLError(
            wrapped.message,
            nodes=error.nodes,
            source=error.source,
            positions=error.positions,
            path=error.path,
            original_error=wrapped,
        )
