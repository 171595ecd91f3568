"""
Utility functions for filesystem setup and form decoding.

This module provides helper functions for:
- Ensuring directory creation for the database file
- Decoding bracketed form keys (``book[title]=...``) into nested dictionaries
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple

# Matches "outer[inner]" form keys
BRACKET_KEY_PATTERN = re.compile(r"^([^\[\]]+)\[([^\[\]]*)\]$")


def ensure_directory(path: Path) -> Path:
    """
    Create a directory if it doesn't exist, including parent directories.

    Args:
        path: The directory path to create

    Returns:
        The same path object for chaining

    Raises:
        OSError: If directory creation fails due to permissions or other I/O errors
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def nest_form_items(items: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """
    Group bracketed form keys under their outer key.

    Plain keys are kept as they are. Only one level of nesting is decoded;
    an empty inner key (``book[]``) is treated as a plain value.

    Args:
        items: Key/value pairs as produced by a form parser

    Returns:
        A dictionary where ``book[title]`` becomes ``{"book": {"title": ...}}``

    Example:
        >>> nest_form_items([("book[title]", "Dune"), ("page", "2")])
        {"book": {"title": "Dune"}, "page": "2"}
    """
    nested: Dict[str, Any] = {}
    for key, value in items:
        match = BRACKET_KEY_PATTERN.match(key)
        if not match or not match.group(2):
            nested[key] = value
            continue
        outer, inner = match.groups()
        group = nested.get(outer)
        if not isinstance(group, dict):
            group = nested[outer] = {}
        group[inner] = value
    return nested
