"""
API Routers Package

Plain HTTP routes next to the GraphQL endpoint:
- images.py: /images/{id} downloads
- testing.py: /testing/reset (never mounted in production)

Each router is imported and registered in main.py.
"""

from catalog.routers.images import router as images_router
from catalog.routers.testing import router as testing_router

__all__ = [
    "images_router",
    "testing_router",
]
