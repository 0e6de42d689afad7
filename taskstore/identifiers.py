"""Identifier generation and validation.

Stores receive their id generator and clock as plain callables so tests can
substitute deterministic ones. Identifiers are canonical lowercase UUID
strings; anything else is rejected at the store boundary.
"""

import re
import time
import uuid
from typing import Callable

IdGenerator = Callable[[], str]
Clock = Callable[[], int]

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
)


def new_id() -> str:
    """Return a fresh random UUID4 string."""
    return str(uuid.uuid4())


def is_valid_id(value: object) -> bool:
    """Check that value is a canonical UUID string."""
    return isinstance(value, str) and _UUID_RE.fullmatch(value) is not None


def now_ns() -> int:
    return time.time_ns()
