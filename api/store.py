"""
In-memory book store backing the API.
"""

import secrets
from datetime import datetime, timezone
from typing import List, Optional

import structlog

from api.models import BookPayload, BookRecord, BookSummary

logger = structlog.get_logger(__name__)


class BookStoreError(Exception):
    """Base class for store failures. Carries the HTTP status to report."""

    status_code = 500
    reason = "Book store error"

    def __init__(self, reason: Optional[str] = None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class MissingNameError(BookStoreError):
    status_code = 400
    reason = "Please provide the book name"


class InvalidPageRangeError(BookStoreError):
    status_code = 400
    reason = "readPage cannot be greater than pageCount"


class BookNotFoundError(BookStoreError):
    status_code = 404
    reason = "Id not found"

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__()


class BookInsertError(BookStoreError):
    status_code = 500
    reason = "Book was not stored"


def _flag(value: bool) -> str:
    return "1" if value else "0"


class BookStore:
    """Ordered, in-memory collection of book records."""

    def __init__(self, id_length: int = 16):
        self.id_length = id_length
        self._books: List[BookRecord] = []

    def generate_id(self) -> str:
        """Generate a URL-safe id of ``id_length`` characters."""
        return secrets.token_urlsafe(self.id_length)[:self.id_length]

    @staticmethod
    def validate(payload: BookPayload) -> None:
        """
        Check the rules shared by add and update.

        Raises:
            MissingNameError: name is absent or empty
            InvalidPageRangeError: read_page is past page_count
        """
        if payload.name is None or payload.name == "":
            raise MissingNameError()
        if payload.read_page > payload.page_count:
            raise InvalidPageRangeError()

    def add(self, payload: BookPayload) -> str:
        """
        Validate and append a new book.

        Args:
            payload: Book fields from the request

        Returns:
            The generated book id
        """
        self.validate(payload)

        now = datetime.now(timezone.utc)
        book = BookRecord(
            id=self.generate_id(),
            name=payload.name,
            year=payload.year,
            author=payload.author,
            summary=payload.summary,
            publisher=payload.publisher,
            page_count=payload.page_count,
            read_page=payload.read_page,
            finished=payload.page_count == payload.read_page,
            reading=payload.reading,
            inserted_at=now,
            updated_at=now,
        )
        self._books.append(book)

        if self._find_index(book.id) is None:
            logger.error("Book missing after insert", book_id=book.id)
            raise BookInsertError()

        logger.info("Book added", book_id=book.id, name=book.name)
        return book.id

    def list_books(
        self,
        name: Optional[str] = None,
        reading: Optional[str] = None,
        finished: Optional[str] = None
    ) -> List[BookSummary]:
        """
        List books as {id, name, publisher} summaries.

        Args:
            name: Case-insensitive substring of the book name
            reading: "1" for books being read, "0" for the rest
            finished: "1" for finished books, "0" for the rest

        Returns:
            Matching summaries in insertion order
        """
        books = list(self._books)

        if name is not None:
            needle = name.lower()
            books = [book for book in books if needle in book.name.lower()]

        if reading is not None:
            books = [book for book in books if _flag(book.reading) == reading]

        if finished is not None:
            books = [book for book in books if _flag(book.finished) == finished]

        return [
            BookSummary(id=book.id, name=book.name, publisher=book.publisher)
            for book in books
        ]

    def get(self, book_id: str) -> BookRecord:
        """Return the full record for ``book_id``."""
        index = self._find_index(book_id)
        if index is None:
            logger.debug("Book not found", book_id=book_id)
            raise BookNotFoundError(book_id)
        return self._books[index]

    def update(self, book_id: str, payload: BookPayload) -> BookRecord:
        """
        Replace every mutable field of a book in place.

        Validation runs before the lookup, so an invalid payload is reported
        even when the id is unknown.
        """
        self.validate(payload)

        index = self._find_index(book_id)
        if index is None:
            logger.warning("Update of unknown book", book_id=book_id)
            raise BookNotFoundError(book_id)

        book = self._books[index]
        book.name = payload.name
        book.year = payload.year
        book.author = payload.author
        book.summary = payload.summary
        book.publisher = payload.publisher
        book.page_count = payload.page_count
        book.read_page = payload.read_page
        book.reading = payload.reading
        book.finished = payload.page_count == payload.read_page
        book.updated_at = datetime.now(timezone.utc)

        logger.info("Book updated", book_id=book_id)
        return book

    def delete(self, book_id: str) -> None:
        """Remove the book with ``book_id``."""
        index = self._find_index(book_id)
        if index is None:
            logger.warning("Delete of unknown book", book_id=book_id)
            raise BookNotFoundError(book_id)

        del self._books[index]
        logger.info("Book deleted", book_id=book_id)

    def count(self) -> int:
        return len(self._books)

    def clear(self) -> None:
        self._books.clear()

    def _find_index(self, book_id: str) -> Optional[int]:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return None
