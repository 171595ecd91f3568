from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog import BookCatalog
from .configuration import configure_logging, get_settings
from .database import CatalogDatabase
from .errors import CatalogError
from .middleware import RequestLoggingMiddleware
from .models import Author, AuthorParams, Book, BookPage, BookParams, Message, Publisher, PublisherParams
from .pagination import parse_page_number
from .params import permit, read_body, require

settings = get_settings()
configure_logging(settings)

app = FastAPI(title="Book Catalog API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors.allow_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

catalog = BookCatalog(
    CatalogDatabase(Path(settings.database.path)),
    per_page=int(settings.pagination.per_page),
)


def get_catalog() -> BookCatalog:
    return catalog


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.get("/healthz")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}


# -- books -------------------------------------------------------------------


@app.get("/books", response_model=BookPage)
def list_books(
    page: Optional[str] = Query(default=None, description="1-indexed page number"),
    manager: BookCatalog = Depends(get_catalog),
) -> BookPage:
    return manager.list_books(parse_page_number(page))


@app.get("/books/{book_id}", response_model=Book)
def get_book(book_id: str, manager: BookCatalog = Depends(get_catalog)) -> Book:
    return manager.get_book(book_id)


@app.post("/books", response_model=Book, status_code=201)
async def create_book(request: Request, manager: BookCatalog = Depends(get_catalog)) -> Book:
    payload = await read_body(request)
    attrs = permit(require(payload, "book"), BookParams)
    return manager.create_book(attrs)


@app.api_route("/books/{book_id}", methods=["PUT", "PATCH"], status_code=204, response_class=Response)
async def update_book(book_id: str, request: Request, manager: BookCatalog = Depends(get_catalog)) -> Response:
    # An unknown id is reported before the body is looked at
    manager.get_book(book_id)
    payload = await read_body(request)
    attrs = permit(require(payload, "book"), BookParams)
    manager.update_book(book_id, attrs)
    return Response(status_code=204)


@app.delete("/books/{book_id}", response_model=Message)
def destroy_book(book_id: str, manager: BookCatalog = Depends(get_catalog)) -> Message:
    return manager.destroy_book(book_id)


# -- authors -----------------------------------------------------------------


@app.get("/authors", response_model=List[Author])
def list_authors(manager: BookCatalog = Depends(get_catalog)) -> List[Author]:
    return manager.list_authors()


@app.get("/authors/{author_id}", response_model=Author)
def get_author(author_id: str, manager: BookCatalog = Depends(get_catalog)) -> Author:
    return manager.get_author(author_id)


@app.post("/authors", response_model=Author, status_code=201)
async def create_author(request: Request, manager: BookCatalog = Depends(get_catalog)) -> Author:
    payload = await read_body(request)
    attrs = permit(require(payload, "author"), AuthorParams)
    return manager.create_author(attrs)


# -- publishers --------------------------------------------------------------


@app.get("/publishers", response_model=List[Publisher])
def list_publishers(manager: BookCatalog = Depends(get_catalog)) -> List[Publisher]:
    return manager.list_publishers()


@app.get("/publishers/{publisher_id}", response_model=Publisher)
def get_publisher(publisher_id: str, manager: BookCatalog = Depends(get_catalog)) -> Publisher:
    return manager.get_publisher(publisher_id)


@app.post("/publishers", response_model=Publisher, status_code=201)
async def create_publisher(request: Request, manager: BookCatalog = Depends(get_catalog)) -> Publisher:
    payload = await read_body(request)
    attrs = permit(require(payload, "publisher"), PublisherParams)
    return manager.create_publisher(attrs)
