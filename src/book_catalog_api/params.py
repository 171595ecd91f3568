"""
Request parameter handling: reading the body, requiring the nested key and
whitelisting the attributes beneath it.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Type

from fastapi import Request
from pydantic import BaseModel, ValidationError

from .errors import ParameterMissing, RecordInvalid
from .utils import nest_form_items

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")
INTEGER_ANNOTATIONS = (int, Optional[int])
RANGE_ERRORS = ("greater_than_equal", "less_than_equal")


async def read_body(request: Request) -> Dict[str, Any]:
    """
    Decode the request body into a dictionary.

    JSON and form bodies are supported. An empty or undecodable body, or a
    JSON document that is not an object, yields an empty dictionary so the
    caller reports the missing parameter.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return nest_form_items(form.multi_items())

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def require(payload: Dict[str, Any], key: str) -> Dict[str, Any]:
    """
    Return the nested object under ``key``.

    Raises:
        ParameterMissing: If the key is absent, or its value is empty or not an object
    """
    value = payload.get(key)
    if not isinstance(value, dict) or not value:
        raise ParameterMissing(key)
    return value


def permit(params: Dict[str, Any], schema: Type[BaseModel]) -> Dict[str, Any]:
    """
    Keep only the attributes ``schema`` declares, coerced to their types.

    Only keys the client actually sent are returned, so an update leaves the
    other attributes untouched.

    Raises:
        RecordInvalid: If a supplied value cannot be coerced
    """
    try:
        permitted = schema.model_validate(params)
    except ValidationError as exc:
        errors = []
        for error in exc.errors():
            attribute = str(error["loc"][0])
            field = schema.model_fields[attribute]
            if error["type"] in RANGE_ERRORS:
                violation = "is out of range"
            elif field.annotation in INTEGER_ANNOTATIONS:
                violation = "is not a number"
            else:
                violation = "is invalid"
            errors.append((attribute, violation))
        raise RecordInvalid(errors) from exc
    return permitted.model_dump(exclude_unset=True)
