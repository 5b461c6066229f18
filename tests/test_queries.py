"""
GraphQL Query Tests

Tests for the read side of the API:
- bookCount / authorCount
- allBooks with every combination of filters
- allAuthors live book counts
- allGenres, findBook, findAuthor and me
- Store failures reported as INTERNAL_SERVER_ERROR
"""

from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.orm import Session

from catalog.models import Author, Book, User
from tests.conftest import error_code, graphql_query

ALL_BOOKS_QUERY = """
query($author: String, $genre: String) {
    allBooks(author: $author, genre: $genre) {
        title
        published
        genres
        author {
            name
            bookCount
        }
    }
}
"""


def titles(result: dict) -> set[str]:
    return {book["title"] for book in result["data"]["allBooks"]}


class TestCounts:
    """Tests for bookCount and authorCount."""

    def test_counts_empty(self, client: TestClient):
        result = graphql_query(client, "query { bookCount authorCount }")

        assert "errors" not in result
        assert result["data"] == {"bookCount": 0, "authorCount": 0}

    def test_counts_with_data(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(client, "query { bookCount authorCount }")

        assert result["data"] == {"bookCount": 5, "authorCount": 2}


class TestAllBooks:
    """Tests for the four allBooks filter branches."""

    def test_no_filters_returns_every_book(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(client, ALL_BOOKS_QUERY)

        assert "errors" not in result
        assert titles(result) == {book.title for book in catalog_books}

    def test_author_and_genre(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(
            client,
            ALL_BOOKS_QUERY,
            variables={"author": "Jack Swanson", "genre": "Horror"},
        )

        assert "errors" not in result
        assert titles(result) == {"Oddly Normal", "Even Stranger", "The Oddest"}
        for book in result["data"]["allBooks"]:
            assert book["author"]["name"] == "Jack Swanson"
            assert "Horror" in book["genres"]

    def test_author_only(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"author": "Jack Swanson"})

        assert titles(result) == {
            "Oddly Normal",
            "Even Stranger",
            "The Oddest",
            "The great amazonian jungle",
        }

    def test_genre_only(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"genre": "Horror"})

        assert titles(result) == {"Oddly Normal", "Even Stranger", "The Oddest", "Swamp Thing"}

    def test_unknown_author_returns_empty_list(
        self, client: TestClient, catalog_books: list[Book]
    ):
        """Test an unknown author is not an error."""
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"author": "Unknown"})

        assert "errors" not in result
        assert result["data"]["allBooks"] == []

    def test_unknown_author_with_genre_returns_empty_list(
        self, client: TestClient, catalog_books: list[Book]
    ):
        result = graphql_query(
            client, ALL_BOOKS_QUERY, variables={"author": "Unknown", "genre": "Horror"}
        )

        assert "errors" not in result
        assert result["data"]["allBooks"] == []

    def test_embedded_author_carries_stored_count(
        self, client: TestClient, catalog_books: list[Book]
    ):
        result = graphql_query(client, ALL_BOOKS_QUERY, variables={"author": "Alan Moore"})

        assert result["data"]["allBooks"] == [
            {
                "title": "Swamp Thing",
                "published": 1984,
                "genres": ["Horror", "Sci-Fi"],
                "author": {"name": "Alan Moore", "bookCount": 1},
            }
        ]


class TestAllAuthors:
    """Tests for allAuthors."""

    def test_live_book_counts(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(client, "query { allAuthors { name bookCount } }")

        assert "errors" not in result
        counts = {a["name"]: a["bookCount"] for a in result["data"]["allAuthors"]}
        assert counts == {"Jack Swanson": 4, "Alan Moore": 1}

    def test_author_without_books(self, client: TestClient, sample_author: Author):
        result = graphql_query(client, "query { allAuthors { name born bookCount } }")

        assert result["data"]["allAuthors"] == [
            {"name": "Ursula Le Guin", "born": 1929, "bookCount": 0}
        ]

    def test_live_count_ignores_stored_counter(
        self,
        client: TestClient,
        db_session: Session,
        catalog_books: list[Book],
    ):
        """Test allAuthors counts books even when the stored counter drifted."""
        author = db_session.query(Author).filter_by(name="Alan Moore").one()
        author.book_count = 7
        db_session.commit()

        result = graphql_query(client, "query { allAuthors { name bookCount } }")
        counts = {a["name"]: a["bookCount"] for a in result["data"]["allAuthors"]}

        assert counts["Alan Moore"] == 1


class TestAllGenres:
    """Tests for allGenres."""

    def test_distinct_genres(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(client, "query { allGenres }")

        assert "errors" not in result
        # Order comes from the database's DISTINCT, so compare sorted
        assert sorted(result["data"]["allGenres"]) == [
            "Adventure",
            "Fantasy",
            "Horror",
            "Nature",
            "Sci-Fi",
        ]

    def test_no_genres(self, client: TestClient):
        result = graphql_query(client, "query { allGenres }")
        assert result["data"]["allGenres"] == []


class TestLookups:
    """Tests for findBook and findAuthor."""

    def test_find_book(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(
            client,
            'query { findBook(title: "Swamp Thing") { title author { name } } }',
        )

        assert result["data"]["findBook"] == {
            "title": "Swamp Thing",
            "author": {"name": "Alan Moore"},
        }

    def test_find_book_not_found(self, client: TestClient):
        result = graphql_query(client, 'query { findBook(title: "Nope") { title } }')

        assert "errors" not in result
        assert result["data"]["findBook"] is None

    def test_find_author(self, client: TestClient, catalog_books: list[Book]):
        result = graphql_query(
            client, 'query { findAuthor(name: "Jack Swanson") { name bookCount } }'
        )

        assert result["data"]["findAuthor"] == {"name": "Jack Swanson", "bookCount": 4}


class TestMeQuery:
    """Tests for the me query."""

    def test_me_authenticated(self, client: TestClient, sample_user: User, auth_token: str):
        result = graphql_query(
            client, "query { me { id username favoriteGenre } }", token=auth_token
        )

        assert "errors" not in result
        assert result["data"]["me"] == {
            "id": str(sample_user.id),
            "username": "testUser1",
            "favoriteGenre": "Horror",
        }

    def test_me_anonymous(self, client: TestClient):
        result = graphql_query(client, "query { me { username } }")

        assert "errors" not in result
        assert result["data"]["me"] is None

    def test_me_with_invalid_token(self, client: TestClient, sample_user: User):
        """Test a bad token gives an anonymous request, not an error."""
        result = graphql_query(client, "query { me { username } }", token="not-a-jwt")

        assert "errors" not in result
        assert result["data"]["me"] is None

    def test_bearer_scheme_is_case_insensitive(
        self, client: TestClient, sample_user: User, auth_token: str
    ):
        response = client.post(
            "/graphql",
            json={"query": "query { me { username } }"},
            headers={"Authorization": f"Bearer {auth_token}"},
        )

        assert response.json()["data"]["me"] == {"username": "testUser1"}


class TestStoreFailures:
    """Tests for errors raised by the store rather than by a resolver."""

    def test_store_error_is_internal_error(self, client: TestClient, db_session: Session):
        db_session.execute(text("DROP TABLE book_genres"))
        db_session.commit()

        result = graphql_query(client, "query { allGenres }")

        assert error_code(result) == "INTERNAL_SERVER_ERROR"
        assert "book_genres" not in result["errors"][0]["message"]
        assert "SQL" not in result["errors"][0]["message"]

    def test_syntax_errors_are_left_alone(self, client: TestClient):
        result = graphql_query(client, "query { noSuchField }")

        assert "errors" in result
        assert (result["errors"][0].get("extensions") or {}).get("code") != "INTERNAL_SERVER_ERROR"
