from __future__ import annotations

import re
from typing import Optional

from .constants import MAX_IDENTIFIER_LEN
from .errors import InvalidIdentifier

_IDENTIFIER = re.compile(r"[A-Za-z0-9_-]+")


def identifier_problem(value: str) -> Optional[str]:
    """Return why *value* is not a valid identifier, or None if it is."""
    if not value or len(value) > MAX_IDENTIFIER_LEN:
        return f"must be between 1 and {MAX_IDENTIFIER_LEN} characters"
    if _IDENTIFIER.fullmatch(value) is None:
        return "must only contain letters, digits, underscores and dashes"
    return None


def validate_identifier(value: str, kind: str = "path") -> None:
    problem = identifier_problem(value)
    if problem is not None:
        raise InvalidIdentifier(f"{kind} {value!r} {problem}")


def validate_directory(value: str) -> None:
    """LIST takes "/" or a slash-separated run of identifiers."""
    if value == "/":
        return
    segments = value.strip("/").split("/")
    if value.strip("/") == "":
        raise InvalidIdentifier(f"directory {value!r} is empty")
    for segment in segments:
        validate_identifier(segment, kind="directory segment")
