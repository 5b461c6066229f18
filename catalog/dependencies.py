"""
FastAPI Dependencies Module

Reusable dependencies for the plain HTTP routes. GraphQL resolvers get
the same collaborators through the GraphQL context instead.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from catalog.database import get_db
from catalog.services.images import ImageStore

# Instead of writing:
#   def get_image(db: Session = Depends(get_db)):
# routes can write:
#   def get_image(db: DbSession):
DbSession = Annotated[Session, Depends(get_db)]


def get_image_store(request: Request) -> ImageStore:
    """The application's image store (created in create_app)."""
    return request.app.state.image_store


ImageStoreDep = Annotated[ImageStore, Depends(get_image_store)]
