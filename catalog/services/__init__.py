"""
Services Package

Domain logic used by the GraphQL resolvers:
- validation: argument rules for every mutation
- authors: find-or-increment author resolution
- security: password hashing and JWT tokens
- events: in-process event bus for subscriptions
- images: chunked image storage
"""

from catalog.services.events import EventBus, EventType
from catalog.services.images import ImageStore

__all__ = ["EventBus", "EventType", "ImageStore"]
