"""Result values for fallible store operations.

A store operation that can fail returns either ``Ok(value)`` or
``Err(error)``, where ``error`` is a ``StoreError``. Callers branch on
``is_ok()`` or use ``unwrap()`` to get the value or raise the error.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from taskstore.errors import StoreError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome holding the operation's value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed outcome holding the StoreError that describes it."""

    error: StoreError

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Err]
