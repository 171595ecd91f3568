"""
Pytest configuration and fixtures for Book Catalog API tests.
"""

import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing the app
os.environ["CATALOG_DB_PATH"] = os.path.join(tempfile.mkdtemp(prefix="catalog_test_"), "catalog.db")
os.environ["CATALOG_LOG_LEVEL"] = "WARNING"

from book_catalog_api.catalog import BookCatalog
from book_catalog_api.database import CatalogDatabase
from book_catalog_api.main import app, get_catalog


@pytest.fixture
def database(tmp_path):
    """A fresh, empty database for each test."""
    return CatalogDatabase(tmp_path / "catalog.db")


@pytest.fixture
def catalog(database):
    return BookCatalog(database, per_page=25)


@pytest.fixture
def client(catalog):
    """Create a test client whose endpoints use the per-test catalog."""
    app.dependency_overrides[get_catalog] = lambda: catalog
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def author(database):
    return database.create_author("Ursula K. Le Guin")


@pytest.fixture
def publisher(database):
    return database.create_publisher("Ace Books")


@pytest.fixture
def book_attributes(author, publisher):
    """Return a factory of valid book attributes; keyword arguments override the defaults."""
    counter = {"n": 0}

    def build(**overrides):
        counter["n"] += 1
        attrs = {
            "title": f"Book {counter['n']}",
            "genre": "Science Fiction",
            "language": "English",
            "edition": "1st",
            "place": "New York",
            "year": 1969,
            "author_id": author["id"],
            "publisher_id": publisher["id"],
        }
        attrs.update(overrides)
        return attrs

    return build


@pytest.fixture
def make_book(database, book_attributes):
    """Insert a book directly through the database and return it."""

    def create(**overrides):
        return database.create_book(book_attributes(**overrides))

    return create
