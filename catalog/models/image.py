"""
Image Storage Models

A GridFS-style layout: one ImageFile row describes an uploaded file and
its bytes live in ordered ImageChunk rows. Reading the chunks back in
order of n reproduces the original upload.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, LargeBinary, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.database import Base


class ImageFile(Base):
    """
    Metadata for one stored image.

    Table: image_files
    """

    __tablename__ = "image_files"

    id: Mapped[int] = mapped_column(primary_key=True)

    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Original client filename"
    )

    content_type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="MIME type reported by the client"
    )

    length: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Total size in bytes"
    )

    chunk_size: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Maximum size of each chunk in bytes"
    )

    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    chunks: Mapped[list["ImageChunk"]] = relationship(
        "ImageChunk",
        cascade="all, delete-orphan",
        order_by="ImageChunk.n",
    )

    def __repr__(self) -> str:
        return f"ImageFile(id={self.id}, filename='{self.filename}', length={self.length})"


class ImageChunk(Base):
    """
    One slice of an image's bytes.

    Table: image_chunks
    """

    __tablename__ = "image_chunks"
    __table_args__ = (UniqueConstraint("file_id", "n", name="uq_image_chunks_file_n"),)

    id: Mapped[int] = mapped_column(primary_key=True)

    file_id: Mapped[int] = mapped_column(
        ForeignKey("image_files.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    # Zero-based position of the chunk within the file
    n: Mapped[int] = mapped_column(Integer, nullable=False)

    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    def __repr__(self) -> str:
        return f"ImageChunk(file_id={self.file_id}, n={self.n})"
