"""
Book Catalog API - REST API for a catalog of books, authors and publishers

This package provides a FastAPI-based web service for managing books, each
of which references an author and a publisher. It enables:

- Paginated listing of books (25 per page by default)
- Creating, reading, updating and deleting books
- Creating and reading the authors and publishers books refer to
- JSON error bodies with a status code for every failure

Key Components:
    - main: FastAPI application and HTTP endpoint definitions
    - catalog: Service layer behind the endpoints (pagination, logging)
    - database: SQLite persistence and record validation
    - params: Request body decoding and parameter whitelisting
    - errors: Exception taxonomy mapped to HTTP statuses
    - models: Pydantic models for responses and permitted parameters
    - pagination: Page arithmetic and page number parsing
    - configuration: Settings loading and logging setup

Usage:
    Run the API server with:
        uvicorn book_catalog_api.main:app --reload --host 0.0.0.0 --port 8000

    Or use the development script:
        uv run uvicorn book_catalog_api.main:app --reload
"""
