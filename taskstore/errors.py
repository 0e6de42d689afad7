"""Failure types reported by the record stores.

Every failure carries a short ``code`` naming its kind and a human readable
message. Stores return these inside ``Err`` rather than raising them;
``Result.unwrap()`` raises them for callers that want exceptions.
"""


class StoreError(Exception):
    """Base class for all record store failures."""

    code = "StoreError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StoreError):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class NotFound(StoreError):
    """No record is stored under the requested id."""

    code = "NotFound"

    def __init__(self, id: str):
        super().__init__(f"Record with id={id} not found.")
        self.id = id


class InvalidId(StoreError):
    """The id is not a well-formed identifier."""

    code = "InvalidId"

    def __init__(self, id: str):
        super().__init__(f"Invalid id: {id!r}.")
        self.id = id


class ValidationError(StoreError):
    code = "ValidationError"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class AlreadyReserved(StoreError):
    """Reservation attempted on a ticket that is already reserved."""

    code = "AlreadyReserved"

    def __init__(self, id: str):
        super().__init__(f"Ticket with id={id} is already reserved.")
        self.id = id
