"""
FastAPI main application for the Bookshelf API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import APIConfig, config as api_config
from api.models import (
    BookData, BookIdData, BookListData, BookPayload,
    Envelope, HealthResponse, ResponseStatus
)
from api.store import (
    BookNotFoundError, BookStore, BookStoreError
)

# Setup logging
logger = structlog.get_logger(__name__)


def get_book_store(request: Request) -> BookStore:
    """Dependency returning the store owned by the running application."""
    return request.app.state.store


def fail_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=Envelope(status=ResponseStatus.FAIL, message=message).render(),
        headers=headers
    )


def store_error(exc: BookStoreError, action: Optional[str]) -> HTTPException:
    """Translate a store failure into an HTTP error for the given action."""
    if isinstance(exc, BookNotFoundError) and action is None:
        return HTTPException(status_code=exc.status_code, detail="Book not found")
    if exc.status_code >= 500:
        return HTTPException(status_code=exc.status_code, detail=f"Failed to {action}")
    return HTTPException(status_code=exc.status_code, detail=f"Failed to {action}. {exc.reason}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Bookshelf API", version=app.version)

    yield

    # Shutdown
    logger.info("Shutting down Bookshelf API", books_count=app.state.store.count())
    app.state.store.clear()


def create_app(settings: Optional[APIConfig] = None, store: Optional[BookStore] = None) -> FastAPI:
    """
    Build the application around a book store.

    Args:
        settings: Configuration override, defaults to the global config
        store: Store to serve, a fresh one is created when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or api_config

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.store = store if store is not None else BookStore(id_length=settings.book_id_length)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return fail_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed payloads and query strings as 400."""
        logger.info("Rejected invalid request", path=request.url.path, errors=len(exc.errors()))
        return fail_response(status.HTTP_400_BAD_REQUEST, "Invalid request payload")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        message = "Internal server error"
        if settings.debug:
            message = f"{message}: {exc}"
        return fail_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(store: BookStore = Depends(get_book_store)):
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc),
            version=settings.api_version,
            books_count=store.count()
        )

    # Books endpoints
    @app.post("/books", status_code=status.HTTP_201_CREATED, tags=["Books"])
    async def add_book(payload: BookPayload, store: BookStore = Depends(get_book_store)):
        """
        Add a book to the shelf.

        - **name**: Required, must not be empty
        - **readPage**: Must not exceed **pageCount**
        """
        try:
            book_id = store.add(payload)
        except BookStoreError as e:
            raise store_error(e, "add book")

        return JSONResponse(
            status_code=status.HTTP_201_CREATED,
            content=Envelope(
                status=ResponseStatus.SUCCESS,
                message="Book added successfully",
                data=BookIdData(book_id=book_id)
            ).render()
        )

    @app.get("/books", tags=["Books"])
    async def list_books(
        name: Optional[str] = None,
        reading: Optional[str] = None,
        finished: Optional[str] = None,
        store: BookStore = Depends(get_book_store)
    ):
        """
        List books as id, name and publisher.

        - **name**: Case-insensitive substring of the book name
        - **reading**: 1 for books being read, 0 otherwise
        - **finished**: 1 for finished books, 0 otherwise
        """
        books = store.list_books(name=name, reading=reading, finished=finished)
        return JSONResponse(
            content=Envelope(
                status=ResponseStatus.SUCCESS,
                data=BookListData(books=books)
            ).render()
        )

    @app.get("/books/{book_id}", tags=["Books"])
    async def get_book(book_id: str, store: BookStore = Depends(get_book_store)):
        """Get a single book by ID."""
        try:
            book = store.get(book_id)
        except BookStoreError as e:
            raise store_error(e, None)

        return JSONResponse(
            content=Envelope(
                status=ResponseStatus.SUCCESS,
                data=BookData(book=book)
            ).render()
        )

    @app.put("/books/{book_id}", tags=["Books"])
    async def update_book(
        book_id: str,
        payload: BookPayload,
        store: BookStore = Depends(get_book_store)
    ):
        """Replace the fields of a book. Omitted fields fall back to their defaults."""
        try:
            store.update(book_id, payload)
        except BookStoreError as e:
            raise store_error(e, "update book")

        return JSONResponse(
            content=Envelope(
                status=ResponseStatus.SUCCESS,
                message="Book updated successfully"
            ).render()
        )

    @app.delete("/books/{book_id}", tags=["Books"])
    async def delete_book(book_id: str, store: BookStore = Depends(get_book_store)):
        """Delete a book by ID."""
        try:
            store.delete(book_id)
        except BookStoreError as e:
            raise store_error(e, "delete book")

        return JSONResponse(
            content=Envelope(
                status=ResponseStatus.SUCCESS,
                message="Book deleted successfully"
            ).render()
        )

    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level=api_config.log_level.lower()
    )
