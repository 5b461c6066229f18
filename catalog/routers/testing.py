"""
Testing Router

Endpoints that only exist outside production. create_app() does not mount
this router when ENVIRONMENT=production.
"""

import logging

from fastapi import APIRouter, status

from catalog.database import clear_tables
from catalog.dependencies import DbSession

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/testing",
    tags=["Testing"],
)


@router.post(
    "/reset",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear all collections",
    description="Delete every user, author, book and image. Not available in production.",
)
def reset_database(db: DbSession) -> None:
    """Empty every table."""
    logger.warning("Clearing all tables via /testing/reset")
    clear_tables(db)
