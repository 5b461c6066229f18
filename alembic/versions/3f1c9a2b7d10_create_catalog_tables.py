"""Create catalog tables

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('image_files',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False, comment='Original client filename'),
        sa.Column('content_type', sa.String(length=100), nullable=False, comment='MIME type reported by the client'),
        sa.Column('length', sa.Integer(), nullable=False, comment='Total size in bytes'),
        sa.Column('chunk_size', sa.Integer(), nullable=False, comment='Maximum size of each chunk in bytes'),
        sa.Column('upload_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('image_chunks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('file_id', sa.Integer(), nullable=False),
        sa.Column('n', sa.Integer(), nullable=False),
        sa.Column('data', sa.LargeBinary(), nullable=False),
        sa.ForeignKeyConstraint(['file_id'], ['image_files.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('file_id', 'n', name='uq_image_chunks_file_n')
    )
    op.create_index(op.f('ix_image_chunks_file_id'), 'image_chunks', ['file_id'], unique=False)

    op.create_table('authors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=170), nullable=False, comment="Author's full name"),
        sa.Column('born', sa.Integer(), nullable=True, comment='Birth year'),
        sa.Column('description', sa.String(length=600), nullable=True, comment='Short author biography'),
        sa.Column('image_id', sa.Integer(), nullable=True, comment='Portrait in the image store'),
        sa.Column('book_count', sa.Integer(), server_default='0', nullable=False, comment='Number of books added for this author'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='When the author record was created'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='When the author record was last updated'),
        sa.ForeignKeyConstraint(['image_id'], ['image_files.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_authors_name'), 'authors', ['name'], unique=True)

    op.create_table('books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=150), nullable=False, comment='Book title'),
        sa.Column('published', sa.Integer(), nullable=False, comment='Publication year'),
        sa.Column('description', sa.String(length=1600), nullable=True, comment='Book description or summary'),
        sa.Column('author_id', sa.Integer(), nullable=False, comment='Author of the book'),
        sa.Column('image_id', sa.Integer(), nullable=True, comment='Cover image in the image store'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['author_id'], ['authors.id']),
        sa.ForeignKeyConstraint(['image_id'], ['image_files.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_books_title'), 'books', ['title'], unique=True)
    op.create_index(op.f('ix_books_published'), 'books', ['published'], unique=False)
    op.create_index(op.f('ix_books_author_id'), 'books', ['author_id'], unique=False)

    op.create_table('book_genres',
        sa.Column('book_id', sa.Integer(), nullable=False),
        sa.Column('genre', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('book_id', 'genre')
    )
    op.create_index(op.f('ix_book_genres_genre'), 'book_genres', ['genre'], unique=False)

    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=30), nullable=False, comment='Unique login name'),
        sa.Column('password_hash', sa.String(length=100), nullable=False, comment='Bcrypt hashed password'),
        sa.Column('favorite_genre', sa.String(length=30), nullable=True, comment='Genre used for recommendations in the client'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='When the user registered'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')
    op.drop_index(op.f('ix_book_genres_genre'), table_name='book_genres')
    op.drop_table('book_genres')
    op.drop_index(op.f('ix_books_author_id'), table_name='books')
    op.drop_index(op.f('ix_books_published'), table_name='books')
    op.drop_index(op.f('ix_books_title'), table_name='books')
    op.drop_table('books')
    op.drop_index(op.f('ix_authors_name'), table_name='authors')
    op.drop_table('authors')
    op.drop_index(op.f('ix_image_chunks_file_id'), table_name='image_chunks')
    op.drop_table('image_chunks')
    op.drop_table('image_files')
