"""
Test book endpoints.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookshelf.crud.book import crud_book
from bookshelf.models.book import Book, BookStatus
from bookshelf.models.user import User
from bookshelf.schemas.book import BookCreate


class TestBookEndpoints:
    """Test book API endpoints."""

    def test_create_book(self, client: TestClient, api_v1_prefix: str, auth_headers: dict):
        book_data = {
            "title": "Piranesi",
            "author": "Susanna Clarke",
            "genre": "Fantasy",
            "status": "To Read",
            "cover_url": "",
        }

        response = client.post(f"{api_v1_prefix}/books/", json=book_data, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Book created successfully"
        data = body["data"]
        assert data["title"] == "Piranesi"
        assert data["status"] == "To Read"
        assert data["cover_url"] is None
        assert data["quotes"] == []
        assert data["date_added"] is not None

    def test_create_book_invalid_status(
        self, client: TestClient, api_v1_prefix: str, auth_headers: dict
    ):
        book_data = {
            "title": "Piranesi",
            "author": "Susanna Clarke",
            "genre": "Fantasy",
            "status": "Skimmed",
        }

        response = client.post(f"{api_v1_prefix}/books/", json=book_data, headers=auth_headers)

        assert response.status_code == 422
        assert any(d["field"] == "status" for d in response.json()["details"])

    @pytest.mark.parametrize(
        "field, value",
        [
            ("title", ""),
            ("rating", 6),
            ("cover_url", "not a url"),
        ],
    )
    def test_create_book_validation(
        self, client: TestClient, api_v1_prefix: str, auth_headers: dict, field, value
    ):
        book_data = {"title": "Valid", "author": "Someone", "genre": "Essay"}
        book_data[field] = value

        response = client.post(f"{api_v1_prefix}/books/", json=book_data, headers=auth_headers)

        assert response.status_code == 422

    def test_read_books_only_own(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        test_book: Book,
        other_user_book: Book,
    ):
        response = client.get(f"{api_v1_prefix}/books/", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        ids = [book["id"] for book in body["data"]]
        assert ids == [test_book.id]
        assert body["meta"]["total"] == 1

    def test_read_books_newest_first(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        test_user: User,
        db_session: Session,
    ):
        now = datetime.now(timezone.utc)
        for title, age in (("Old", 10), ("Newest", 0), ("Middle", 5)):
            crud_book.create_for_user(
                db_session,
                obj_in=BookCreate(
                    title=title,
                    author="Author",
                    genre="Essay",
                    date_added=now - timedelta(days=age),
                ),
                user_id=test_user.id,
            )

        response = client.get(f"{api_v1_prefix}/books/", headers=auth_headers)

        titles = [book["title"] for book in response.json()["data"]]
        assert titles == ["Newest", "Middle", "Old"]

    def test_filter_books_by_status_and_genre(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        test_user: User,
        db_session: Session,
    ):
        for title, status, genre in (
            ("A", BookStatus.COMPLETED, "History"),
            ("B", BookStatus.TO_READ, "History"),
            ("C", BookStatus.COMPLETED, "Poetry"),
        ):
            crud_book.create_for_user(
                db_session,
                obj_in=BookCreate(title=title, author="X", genre=genre, status=status),
                user_id=test_user.id,
            )

        response = client.get(
            f"{api_v1_prefix}/books/",
            params={"status": "Completed", "genre": "History"},
            headers=auth_headers,
        )

        assert [book["title"] for book in response.json()["data"]] == ["A"]
        assert response.json()["meta"]["total"] == 1

    def test_read_book(
        self, client: TestClient, api_v1_prefix: str, auth_headers: dict, test_book: Book
    ):
        response = client.get(f"{api_v1_prefix}/books/{test_book.id}", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == test_book.title
        assert data["quotes"] == ["Light is the left hand of darkness"]

    def test_read_book_not_found(
        self, client: TestClient, api_v1_prefix: str, auth_headers: dict
    ):
        response = client.get(f"{api_v1_prefix}/books/99999", headers=auth_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Book with id 99999 not found"

    def test_read_other_users_book_forbidden(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        other_user_book: Book,
    ):
        response = client.get(
            f"{api_v1_prefix}/books/{other_user_book.id}", headers=auth_headers
        )

        assert response.status_code == 403

    def test_update_book_partial(
        self, client: TestClient, api_v1_prefix: str, auth_headers: dict, test_book: Book
    ):
        update = {"status": "Completed", "finish_date": "2024-02-10", "rating": 5}

        response = client.put(
            f"{api_v1_prefix}/books/{test_book.id}", json=update, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Book updated successfully"
        data = body["data"]
        assert data["status"] == "Completed"
        assert data["finish_date"] == "2024-02-10"
        assert data["rating"] == 5
        # untouched fields keep their values
        assert data["title"] == test_book.title
        assert data["notes"] == "Winter is a planet"

    @pytest.mark.parametrize("field", ["title", "author", "genre", "status", "quotes"])
    def test_update_rejects_null_required_field(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        test_book: Book,
        field: str,
    ):
        response = client.put(
            f"{api_v1_prefix}/books/{test_book.id}", json={field: None}, headers=auth_headers
        )

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert any(d["field"] == field for d in body["details"])

    def test_update_clears_optional_field(
        self, client: TestClient, api_v1_prefix: str, auth_headers: dict, test_book: Book
    ):
        response = client.put(
            f"{api_v1_prefix}/books/{test_book.id}", json={"notes": None}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["notes"] is None

    def test_integrity_error_uses_envelope(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        test_book: Book,
        monkeypatch,
    ):
        def failing_update(db, *, db_obj, obj_in):
            raise IntegrityError(
                "UPDATE books", {}, Exception("NOT NULL constraint failed: books.title")
            )

        monkeypatch.setattr(crud_book, "update", failing_update)

        response = client.put(
            f"{api_v1_prefix}/books/{test_book.id}", json={"rating": 4}, headers=auth_headers
        )

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Conflicting data"

    def test_update_other_users_book_forbidden(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        other_user_book: Book,
    ):
        response = client.put(
            f"{api_v1_prefix}/books/{other_user_book.id}",
            json={"title": "Mine now"},
            headers=auth_headers,
        )

        assert response.status_code == 403

    def test_delete_book(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        test_book: Book,
        db_session: Session,
    ):
        book_id = test_book.id

        response = client.delete(f"{api_v1_prefix}/books/{book_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Book deleted successfully"
        assert crud_book.get(db_session, id=book_id) is None

    def test_delete_book_not_found(
        self, client: TestClient, api_v1_prefix: str, auth_headers: dict
    ):
        response = client.delete(f"{api_v1_prefix}/books/424242", headers=auth_headers)

        assert response.status_code == 404

    def test_delete_other_users_book_forbidden(
        self,
        client: TestClient,
        api_v1_prefix: str,
        auth_headers: dict,
        other_user_book: Book,
        db_session: Session,
    ):
        response = client.delete(
            f"{api_v1_prefix}/books/{other_user_book.id}", headers=auth_headers
        )

        assert response.status_code == 403
        assert crud_book.get(db_session, id=other_user_book.id) is not None
