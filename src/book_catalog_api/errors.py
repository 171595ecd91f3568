"""
Exception taxonomy for the catalog API.

Every failure a client can trigger is raised as a ``CatalogError`` subclass
carrying the HTTP status it maps to. The FastAPI application registers a
single handler for ``CatalogError`` that renders ``{"message": ...}``.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple


class CatalogError(Exception):
    """Base class for errors translated into JSON responses."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RecordNotFound(CatalogError):
    """Raised when a record lookup by primary key finds nothing."""

    status_code = 404

    def __init__(self, model: str, record_id: Any) -> None:
        self.model = model
        self.record_id = record_id
        super().__init__(f"Couldn't find {model} with 'id'={record_id}")


class ParameterMissing(CatalogError):
    """Raised when the nested parameter key is absent or empty."""

    status_code = 400

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"param is missing or the value is empty: {key}")


class RecordInvalid(CatalogError):
    """
    Raised when a record fails validation.

    Args:
        errors: Ordered ``(attribute, violation)`` pairs, e.g.
            ``[("author", "must exist"), ("title", "can't be blank")]``
    """

    status_code = 422

    def __init__(self, errors: Iterable[Tuple[str, str]]) -> None:
        self.errors: List[Tuple[str, str]] = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.full_messages)}")

    @property
    def full_messages(self) -> List[str]:
        return [f"{humanize_attribute(attribute)} {violation}" for attribute, violation in self.errors]


def humanize_attribute(attribute: str) -> str:
    """
    Turn an attribute name into the label used in validation messages.

    Example:
        >>> humanize_attribute("publisher_id")
        "Publisher"
    """
    name = attribute.removesuffix("_id")
    return name.replace("_", " ").capitalize()
