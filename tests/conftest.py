"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from api.store import BookStore


@pytest.fixture
def book_store():
    """Create an empty book store."""
    return BookStore()


@pytest.fixture
def app(book_store):
    """Create an application serving the test store."""
    return create_app(store=book_store)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def sample_book_payload():
    """Sample request body for a book that is still being read."""
    return {
        "name": "Buku A",
        "year": 2010,
        "author": "John Doe",
        "summary": "Lorem ipsum dolor sit amet",
        "publisher": "Dicoding Indonesia",
        "pageCount": 100,
        "readPage": 25,
        "reading": False
    }


@pytest.fixture
def add_book(client, sample_book_payload):
    """Return a helper that posts a book and returns its id."""
    def _add(**overrides):
        payload = {**sample_book_payload, **overrides}
        response = client.post("/books", json=payload)
        assert response.status_code == 201
        return response.json()["data"]["bookId"]
    return _add
