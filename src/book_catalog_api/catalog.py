"""
Catalog service: the operations behind the HTTP endpoints.

``BookCatalog`` sits between the FastAPI routes and ``CatalogDatabase``.
It applies pagination to the book listing, converts stored rows into
response models and logs every change to the catalog.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from .database import CatalogDatabase
from .errors import CatalogError
from .models import Author, Book, BookPage, Message, Publisher
from .pagination import DEFAULT_PER_PAGE, page_window

logger = logging.getLogger(__name__)


class BookCatalog:
    """
    Coordinator for catalog reads and writes.

    Attributes:
        database: The persistence layer
        per_page: Number of books on one listing page
    """

    def __init__(self, database: CatalogDatabase, per_page: int = DEFAULT_PER_PAGE) -> None:
        self.database = database
        self.per_page = per_page

    # -- books -------------------------------------------------------------

    def list_books(self, page: int = 1) -> BookPage:
        """
        Get one page of books ordered by id.

        Args:
            page: 1-indexed page number; a page past the end is returned empty

        Returns:
            BookPage with the total count, the page slice and the descriptor
        """
        window = page_window(page, self.database.count_books(), self.per_page)
        rows = []
        if window.offset < window.total:
            rows = self.database.list_books(limit=window.limit, offset=window.offset)
        return BookPage(
            total_books=window.total,
            list=[Book(**row) for row in rows],
            pagination=window.descriptor,
        )

    def get_book(self, book_id: Any) -> Book:
        with _logged_rejection("show", "Book", book_id):
            return Book(**self.database.get_book(book_id))

    def create_book(self, attrs: Dict[str, Any]) -> Book:
        with _logged_rejection("create", "Book"):
            book = Book(**self.database.create_book(attrs))
        logger.info(f"Created book {book.id} ({book.title!r})")
        return book

    def update_book(self, book_id: Any, attrs: Dict[str, Any]) -> Book:
        with _logged_rejection("update", "Book", book_id):
            book = Book(**self.database.update_book(book_id, attrs))
        logger.info(f"Updated book {book.id}: {', '.join(sorted(attrs)) or 'no changes'}")
        return book

    def destroy_book(self, book_id: Any) -> Message:
        """
        Delete a book.

        Returns:
            Message naming the deleted book's title
        """
        with _logged_rejection("destroy", "Book", book_id):
            book = self.database.delete_book(book_id)
        logger.info(f"Deleted book {book['id']} ({book['title']!r})")
        return Message(message=f"{book['title']} was deleted")

    # -- authors and publishers -------------------------------------------

    def list_authors(self) -> List[Author]:
        return [Author(**row) for row in self.database.list_authors()]

    def get_author(self, author_id: Any) -> Author:
        with _logged_rejection("show", "Author", author_id):
            return Author(**self.database.get_author(author_id))

    def create_author(self, attrs: Dict[str, Any]) -> Author:
        with _logged_rejection("create", "Author"):
            author = Author(**self.database.create_author(attrs.get("name")))
        logger.info(f"Created author {author.id} ({author.name!r})")
        return author

    def list_publishers(self) -> List[Publisher]:
        return [Publisher(**row) for row in self.database.list_publishers()]

    def get_publisher(self, publisher_id: Any) -> Publisher:
        with _logged_rejection("show", "Publisher", publisher_id):
            return Publisher(**self.database.get_publisher(publisher_id))

    def create_publisher(self, attrs: Dict[str, Any]) -> Publisher:
        with _logged_rejection("create", "Publisher"):
            publisher = Publisher(**self.database.create_publisher(attrs.get("name")))
        logger.info(f"Created publisher {publisher.id} ({publisher.name!r})")
        return publisher


@contextmanager
def _logged_rejection(action: str, model: str, record_id: Any = None) -> Iterator[None]:
    """Log a ``CatalogError`` raised inside the block, then let it propagate."""
    try:
        yield
    except CatalogError as exc:
        target = model if record_id is None else f"{model} {record_id}"
        logger.warning(f"Rejected {action} of {target}: {exc.message}")
        raise
