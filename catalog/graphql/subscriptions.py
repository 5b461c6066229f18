"""
GraphQL Subscription Resolvers

Bridges the event bus to GraphQL subscriptions. Each subscription yields
the payloads mutations publish on its topic, converted to GraphQL types
before publishing, so no database session is needed here.
"""

from collections.abc import AsyncGenerator
from contextlib import aclosing

import strawberry
from strawberry.types import Info

from catalog.graphql.context import GraphQLContext
from catalog.graphql.types.author import AuthorType
from catalog.graphql.types.book import BookType
from catalog.services.events import EventType


@strawberry.type
class Subscription:
    """
    GraphQL Subscription type.

    Delivery is best effort: clients only receive events published while
    they are subscribed.
    """

    @strawberry.subscription(description="Books added after subscribing")
    async def book_added(
        self, info: Info[GraphQLContext, None]
    ) -> AsyncGenerator[BookType, None]:
        async with aclosing(info.context.event_bus.subscribe(EventType.BOOK_ADDED)) as events:
            async for book in events:
                yield book

    @strawberry.subscription(description="Authors whose book count, birth year or image changed")
    async def author_updated(
        self, info: Info[GraphQLContext, None]
    ) -> AsyncGenerator[AuthorType, None]:
        async with aclosing(info.context.event_bus.subscribe(EventType.AUTHOR_UPDATED)) as events:
            async for author in events:
                yield author

    @strawberry.subscription(description="Authors created with addAuthor")
    async def author_added(
        self, info: Info[GraphQLContext, None]
    ) -> AsyncGenerator[AuthorType, None]:
        async with aclosing(info.context.event_bus.subscribe(EventType.AUTHOR_ADDED)) as events:
            async for author in events:
                yield author
