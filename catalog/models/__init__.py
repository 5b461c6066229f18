"""
SQLAlchemy Models Package

Model Relationships:
- Author <-> Book: One-to-Many (a book references exactly one author)
- Book <-> BookGenre: One-to-Many (a book carries 1-3 genre rows)
- Author/Book -> ImageFile: optional image in the image store
- ImageFile <-> ImageChunk: One-to-Many ordered byte chunks

Import all models here to:
1. Make them available as: from catalog.models import Book, Author
2. Ensure Alembic and create_tables() discover them
"""

# The order matters for SQLAlchemy to resolve relationships
from catalog.models.image import ImageChunk, ImageFile
from catalog.models.author import Author
from catalog.models.book import Book, BookGenre
from catalog.models.user import User

__all__ = [
    "Author",
    "Book",
    "BookGenre",
    "ImageChunk",
    "ImageFile",
    "User",
]
