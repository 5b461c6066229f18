"""
Book Catalog API Application Package

GraphQL backend for a catalog of books and authors with user accounts,
image uploads and real-time subscriptions.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- models/: SQLAlchemy ORM models (Author, Book, User, images)
- services/: Domain logic (validation, author resolution, security,
  events, image storage)
- graphql/: Strawberry schema, context and resolvers
- routers/: Plain HTTP routes (image download, test reset)
"""

__version__ = "0.1.0"
