"""
GraphQL Package

This package provides the GraphQL API using Strawberry GraphQL.

Features:
- Queries for books, authors, genres and the current user
- Mutations for adding books/authors, editing authors, image uploads,
  user registration and login
- Subscriptions pushed through the application event bus
- Authentication via bearer JWT in the context

Usage:
    The GraphQL endpoint is available at /graphql (HTTP and WebSocket),
    with the GraphiQL IDE when enabled.

Example Query:
    query {
        allBooks(author: "Jack Swanson", genre: "Horror") {
            title
            published
            author { name bookCount }
        }
    }
"""

import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.subscriptions import GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL

from catalog.config import get_settings
from catalog.graphql.context import get_context
from catalog.graphql.extensions import ClassifyErrors
from catalog.graphql.mutations import Mutation
from catalog.graphql.queries import Query
from catalog.graphql.subscriptions import Subscription

# Create the GraphQL schema
schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
    extensions=[ClassifyErrors],
)


def create_graphql_router() -> GraphQLRouter:
    """
    Create the GraphQL router for FastAPI.

    Returns:
        GraphQLRouter configured with schema, context, subscriptions and
        multipart uploads
    """
    settings = get_settings()
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.graphql_ide_enabled else None,
        subscription_protocols=[
            GRAPHQL_TRANSPORT_WS_PROTOCOL,
            GRAPHQL_WS_PROTOCOL,
        ],
        multipart_uploads_enabled=True,
    )


__all__ = ["schema", "create_graphql_router"]
