"""
Image Storage Service

Stores uploaded images as ordered byte chunks (see catalog.models.image)
and streams them back.

The ImageStore is a capability object: the application creates one in
create_app(), keeps it on app.state, and resolvers reach it through the
GraphQL context. Nothing in the resolver layer imports a global store.

Usage:
    store = ImageStore(chunk_size=255 * 1024)

    image = await store.upload(db, "cover.png", "image/png", chunks)
    for data in store.open_download(db, image.id):
        ...
"""

import logging
from collections.abc import AsyncIterable, Iterator

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.errors import CatalogError, InternalError, NotFoundError, ValidationError
from catalog.models.image import ImageChunk, ImageFile

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 255 * 1024


class ImageStore:
    """
    Chunked blob storage backed by the entity store.

    Attributes:
        chunk_size: Maximum bytes per stored chunk
        max_size: Largest accepted file in bytes (None for no limit)
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE, max_size: int | None = None):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self.max_size = max_size

    async def upload(
        self,
        db: Session,
        filename: str,
        content_type: str,
        source: AsyncIterable[bytes],
    ) -> ImageFile:
        """
        Stream bytes from an async source into a new stored file.

        Incoming pieces of any size are re-sliced into chunk_size chunks.
        The file and its chunks are committed together once the source is
        exhausted; if the source or the store fails midway nothing is kept.

        Raises:
            ValidationError: FILE_TOO_LARGE when max_size is exceeded
            InternalError: If reading the source or writing the store fails
        """
        image = ImageFile(
            filename=filename,
            content_type=content_type,
            length=0,
            chunk_size=self.chunk_size,
        )
        db.add(image)

        buffer = bytearray()
        n = 0

        try:
            db.flush()

            async for piece in source:
                buffer.extend(piece)
                image.length += len(piece)

                if self.max_size is not None and image.length > self.max_size:
                    raise ValidationError(
                        f"Image exceeds the maximum size of {self.max_size} bytes",
                        code="FILE_TOO_LARGE",
                    )

                while len(buffer) >= self.chunk_size:
                    db.add(ImageChunk(file_id=image.id, n=n, data=bytes(buffer[: self.chunk_size])))
                    del buffer[: self.chunk_size]
                    n += 1

            if buffer:
                db.add(ImageChunk(file_id=image.id, n=n, data=bytes(buffer)))
                n += 1

            db.commit()
        except CatalogError:
            db.rollback()
            raise
        except (SQLAlchemyError, OSError) as e:
            db.rollback()
            logger.error(f"Image upload of '{filename}' failed: {e}", exc_info=True)
            raise InternalError(f"Storing image failed: {e}") from e

        logger.info(f"Stored image {image.id} ('{filename}', {image.length} bytes, {n} chunks)")
        return image

    def get_file(self, db: Session, file_id: int) -> ImageFile:
        """
        Look up a stored file's metadata.

        Raises:
            NotFoundError: IMAGE_NOT_FOUND
        """
        image = db.get(ImageFile, file_id)
        if image is None:
            raise NotFoundError(f"Image with ID {file_id} not found", code="IMAGE_NOT_FOUND")
        return image

    def open_download(self, db: Session, file_id: int) -> Iterator[bytes]:
        """
        Yield a stored file's bytes chunk by chunk, in order.

        The existence check happens before the first chunk is requested, so
        a missing file fails immediately rather than mid-stream.

        Raises:
            NotFoundError: IMAGE_NOT_FOUND
        """
        self.get_file(db, file_id)
        return self._iter_chunks(db, file_id)

    def _iter_chunks(self, db: Session, file_id: int) -> Iterator[bytes]:
        stmt = (
            select(ImageChunk.data)
            .where(ImageChunk.file_id == file_id)
            .order_by(ImageChunk.n)
        )
        for data in db.execute(stmt).scalars():
            yield data

    def delete(self, db: Session, file_id: int) -> None:
        """
        Remove a stored file and its chunks.

        Raises:
            NotFoundError: IMAGE_NOT_FOUND
            InternalError: If the store fails
        """
        image = self.get_file(db, file_id)
        try:
            db.delete(image)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Deleting image {file_id} failed: {e}", exc_info=True)
            raise InternalError(f"Deleting image failed: {e}") from e

        logger.info(f"Deleted image {file_id}")
