"""
GraphQL Context

Provides request context to all GraphQL resolvers including:
- Database session for queries
- Current authenticated user (if any)
- Event bus used by mutations and subscriptions
- Image store used by the upload mutations

The context is created fresh for each GraphQL request (and once per
WebSocket connection) and passed to all resolvers via the `info`
parameter.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection
from strawberry.fastapi import BaseContext

from catalog.database import get_db
from catalog.errors import AuthenticationError
from catalog.models.user import User
from catalog.services.events import EventBus
from catalog.services.images import ImageStore
from catalog.services.security import decode_token

logger = logging.getLogger(__name__)


class GraphQLContext(BaseContext):
    """
    Context object available to all GraphQL resolvers.

    Attributes:
        db: SQLAlchemy database session
        current_user: Authenticated user (None for anonymous requests)
        event_bus: Application event bus
        image_store: Application image store
    """

    def __init__(
        self,
        db: Session,
        event_bus: EventBus,
        image_store: ImageStore,
        current_user: User | None = None,
    ):
        super().__init__()
        self.db = db
        self.event_bus = event_bus
        self.image_store = image_store
        self.current_user = current_user


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Pull the token out of an "Authorization: bearer <jwt>" header.

    The scheme is matched case-insensitively. Anything else (missing
    header, other scheme, empty token) gives None.
    """
    if not authorization:
        return None

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None

    return token.strip()


def get_user_from_token(db: Session, token: str | None) -> User | None:
    """
    Resolve the user a token was issued for.

    An invalid, expired or orphaned token yields None: the request simply
    runs anonymously and fails later at the authentication gate if it
    needs a user.
    """
    if not token:
        return None

    payload = decode_token(token)
    if payload is None:
        return None

    user_id = payload.get("sub")
    if user_id is None:
        return None

    try:
        return db.get(User, int(user_id))
    except ValueError:
        logger.warning(f"Token carries a non-numeric subject: {user_id!r}")
        return None


def authenticate_user(context: GraphQLContext) -> User:
    """
    The single authorization check: require a logged-in user.

    Any authenticated user may mutate any entity.

    Raises:
        AuthenticationError: UNAUTHENTICATED_USER
    """
    if context.current_user is None:
        raise AuthenticationError(
            "User not authenticated",
            code="UNAUTHENTICATED_USER",
        )
    return context.current_user


async def get_context(
    connection: HTTPConnection,
    db: Session = Depends(get_db),
) -> GraphQLContext:
    """
    Create GraphQL context for each request.

    HTTPConnection covers both plain HTTP requests and the WebSocket
    connections used by subscriptions. The event bus and image store are
    the instances created by create_app() and kept on app.state.
    """
    token = extract_bearer_token(connection.headers.get("Authorization"))
    user = get_user_from_token(db, token)

    return GraphQLContext(
        db=db,
        event_bus=connection.app.state.event_bus,
        image_store=connection.app.state.image_store,
        current_user=user,
    )
