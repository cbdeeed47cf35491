"""Generic utilities for the draft bot."""

import math
import re
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

POSITIVE_INTEGER_PATTERN = re.compile(r"^\+?(0|[1-9]\d*)$")


def string_to_boolean(value) -> Optional[bool]:
    """Parses "true"/"1" and "false"/"0" (case-insensitively).

       Returns None for anything else, so that callers can tell apart an
       explicit false from a value that wasn't understood.
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().casefold()
    if text in ("true", "1"):
        return True
    if text in ("false", "0"):
        return False
    return None


def is_positive_integer(value) -> bool:
    """Whether the string is a whole number greater than zero."""
    text = str(value).strip()
    return POSITIVE_INTEGER_PATTERN.match(text) is not None and int(text) > 0


def is_positive_number(value) -> bool:
    """Whether the string is a finite number greater than zero."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(num) and num > 0


def sanitize_code(text: str) -> str:
    """Makes user input safe to embed inside Discord `inline code`."""
    return text.replace("`", "'")


def paginate(items: Sequence[T], page, per_page: int
             ) -> tuple[int, int, Sequence[T]]:
    """Returns the clamped page number, the page count, and the items of
       that page. Invalid page numbers fall back to the first page.
    """
    assert per_page > 0
    max_page = max(math.ceil(len(items) / per_page), 1)
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    page = max(min(page, max_page), 1)
    return page, max_page, items[(page - 1) * per_page:page * per_page]
