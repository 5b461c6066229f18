"""
Image Upload Tests

Tests for uploadBookImage and uploadAuthorImage over GraphQL multipart
requests (operations + map + file parts).
"""

import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from catalog.models import Author, Book, ImageChunk, ImageFile
from catalog.services.events import EventBus, EventType

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"not really a png but long enough" * 2

UPLOAD_BOOK_IMAGE = """
mutation($title: String!, $file: Upload!) {
    uploadBookImage(title: $title, file: $file) {
        title
        imageId
    }
}
"""

UPLOAD_AUTHOR_IMAGE = """
mutation($name: String!, $file: Upload!) {
    uploadAuthorImage(name: $name, file: $file) {
        name
        imageId
    }
}
"""


def upload(
    client: TestClient,
    query: str,
    variables: dict,
    content: bytes,
    content_type: str = "image/png",
    token: str | None = None,
) -> dict:
    """Send a GraphQL multipart request with a single file."""
    operations = {"query": query, "variables": {**variables, "file": None}}
    headers = {"Apollo-Require-Preflight": "true"}
    if token:
        headers["Authorization"] = f"bearer {token}"

    response = client.post(
        "/graphql",
        data={
            "operations": json.dumps(operations),
            "map": json.dumps({"0": ["variables.file"]}),
        },
        files={"0": ("cover.png", content, content_type)},
        headers=headers,
    )
    return response.json()


class TestUploadBookImage:
    """Tests for uploadBookImage."""

    def test_upload_and_download(
        self, client: TestClient, auth_token: str, catalog_books: list[Book]
    ):
        result = upload(
            client, UPLOAD_BOOK_IMAGE, {"title": "Swamp Thing"}, PNG_BYTES, token=auth_token
        )

        assert "errors" not in result
        book = result["data"]["uploadBookImage"]
        assert book["title"] == "Swamp Thing"
        assert book["imageId"] is not None

        response = client.get(f"/images/{book['imageId']}")
        assert response.status_code == 200
        assert response.content == PNG_BYTES
        assert response.headers["content-type"] == "image/png"

    def test_image_id_visible_in_queries(
        self, client: TestClient, auth_token: str, catalog_books: list[Book]
    ):
        result = upload(
            client, UPLOAD_BOOK_IMAGE, {"title": "Swamp Thing"}, PNG_BYTES, token=auth_token
        )
        image_id = result["data"]["uploadBookImage"]["imageId"]

        found = client.post(
            "/graphql", json={"query": 'query { findBook(title: "Swamp Thing") { imageId } }'}
        ).json()

        assert found["data"]["findBook"]["imageId"] == image_id

    def test_bad_file_type(self, client: TestClient, auth_token: str, catalog_books: list[Book]):
        result = upload(
            client,
            UPLOAD_BOOK_IMAGE,
            {"title": "Swamp Thing"},
            b"plain text",
            content_type="text/plain",
            token=auth_token,
        )

        assert result["errors"][0]["extensions"]["code"] == "BAD_FILE_TYPE"

    def test_book_not_found(self, client: TestClient, auth_token: str):
        result = upload(client, UPLOAD_BOOK_IMAGE, {"title": "Nope"}, PNG_BYTES, token=auth_token)

        assert result["errors"][0]["extensions"]["code"] == "BOOK_NOT_FOUND"

    def test_too_large(self, client: TestClient, auth_token: str, catalog_books: list[Book]):
        """The test image store accepts at most 1024 bytes."""
        result = upload(
            client, UPLOAD_BOOK_IMAGE, {"title": "Swamp Thing"}, b"x" * 2048, token=auth_token
        )

        assert result["errors"][0]["extensions"]["code"] == "FILE_TOO_LARGE"

    def test_unauthenticated(self, client: TestClient, catalog_books: list[Book]):
        result = upload(client, UPLOAD_BOOK_IMAGE, {"title": "Swamp Thing"}, PNG_BYTES)

        assert result["errors"][0]["extensions"]["code"] == "UNAUTHENTICATED_USER"


class TestUploadAuthorImage:
    """Tests for uploadAuthorImage."""

    def test_upload_author_image(
        self,
        client: TestClient,
        auth_token: str,
        event_bus: EventBus,
        sample_author: Author,
    ):
        result = upload(
            client, UPLOAD_AUTHOR_IMAGE, {"name": "Ursula Le Guin"}, PNG_BYTES, token=auth_token
        )

        assert "errors" not in result
        author = result["data"]["uploadAuthorImage"]
        assert author["name"] == "Ursula Le Guin"
        assert client.get(f"/images/{author['imageId']}").content == PNG_BYTES
        assert [e.type for e in event_bus.history] == [EventType.AUTHOR_UPDATED]

    def test_author_not_found(self, client: TestClient, auth_token: str):
        result = upload(
            client, UPLOAD_AUTHOR_IMAGE, {"name": "Nobody Here"}, PNG_BYTES, token=auth_token
        )

        assert result["errors"][0]["extensions"]["code"] == "AUTHOR_NOT_FOUND"


class TestAttachFailure:
    """Tests for a store failure after the image bytes are saved."""

    def test_failed_attach_removes_image(
        self,
        client: TestClient,
        db_session: Session,
        auth_token: str,
        catalog_books: list[Book],
        monkeypatch: pytest.MonkeyPatch,
    ):
        real_commit = db_session.commit
        commits = []

        def commit_failing_on_attach():
            # The first commit stores the image, the second attaches it
            commits.append(1)
            if len(commits) == 2:
                raise OperationalError("UPDATE books", {}, Exception("database is locked"))
            real_commit()

        monkeypatch.setattr(db_session, "commit", commit_failing_on_attach)

        result = upload(
            client, UPLOAD_BOOK_IMAGE, {"title": "Swamp Thing"}, PNG_BYTES, token=auth_token
        )

        assert result["errors"][0]["extensions"]["code"] == "INTERNAL_SERVER_ERROR"
        assert db_session.execute(select(func.count(ImageFile.id))).scalar() == 0
        assert db_session.execute(select(func.count(ImageChunk.id))).scalar() == 0
        book = db_session.execute(select(Book).where(Book.title == "Swamp Thing")).scalar_one()
        assert book.image_id is None
