"""
Images Router

Streams stored images back to clients. Uploads go through the GraphQL
uploadBookImage / uploadAuthorImage mutations.
"""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse

from catalog.dependencies import DbSession, ImageStoreDep
from catalog.errors import NotFoundError

router = APIRouter(
    prefix="/images",
    tags=["Images"],
    responses={
        404: {"description": "Image not found"},
    },
)


@router.get(
    "/{image_id}",
    summary="Download an image",
    description="Stream a stored book cover or author portrait.",
)
def get_image(
    image_id: int,
    db: DbSession,
    store: ImageStoreDep,
) -> StreamingResponse:
    """Stream an image chunk by chunk with its stored content type."""
    try:
        image = store.get_file(db, image_id)
        # Chunks are fetched while the request session is still open
        chunks = list(store.open_download(db, image_id))
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=e.message,
        ) from e

    return StreamingResponse(
        iter(chunks),
        media_type=image.content_type,
        headers={
            "Content-Length": str(image.length),
            "Content-Disposition": f'inline; filename="{image.filename}"',
        },
    )
