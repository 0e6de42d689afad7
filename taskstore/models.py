"""Core models for taskstore.

This module defines the record types kept by the stores:
- Task: a to-do item with a completion flag
- MovieTicket: a seat for a screening with a one-way reservation flag
- SortKey: Enum of orderings supported by RecordStore.sort_by

Records are frozen dataclasses. Stores hand out these snapshots and build
new instances for every change, so a caller never holds a live reference
into the store.
"""

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple

U64_MAX = 2 ** 64 - 1


class SortKey(Enum):
    """Orderings accepted by RecordStore.sort_by."""

    DATE = "date"
    STATUS = "status"


@dataclass(frozen=True)
class Record:
    """Common base for stored records.

    Subclasses declare which boolean field the status queries act on,
    which text fields keyword search looks at, and which fields an
    update may change.
    """

    FLAG_FIELD: ClassVar[str] = ""
    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = ()
    MUTABLE_FIELDS: ClassVar[Tuple[str, ...]] = ()

    @property
    def flag(self) -> bool:
        return getattr(self, self.FLAG_FIELD)

    def validate(self) -> Optional[str]:
        """Return the reason this record is invalid, or None if it is valid."""
        return None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})

    @classmethod
    def field_type(cls, name: str) -> type:
        for f in fields(cls):
            if f.name == name:
                return f.type
        raise KeyError(name)


@dataclass(frozen=True)
class Task(Record):
    """Task record.

    Attributes:
        id: Unique identifier assigned by the store
        title: Task title, may be empty
        body: Free text description
        status: True once the task is completed
        created_at: Creation timestamp in nanoseconds, never changed
    """

    FLAG_FIELD: ClassVar[str] = "status"
    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "body")
    MUTABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("title", "body", "status")

    id: str
    title: str
    body: str = ""
    status: bool = False
    created_at: int = 0


@dataclass(frozen=True)
class MovieTicket(Record):
    """Ticket for one seat of a movie screening.

    Attributes:
        id: Unique identifier assigned by the store
        movie: Movie name, must not be blank
        seat: Seat number, must be positive
        reserved: True once the ticket is reserved; never goes back to False
        created_at: Creation timestamp in nanoseconds, never changed
    """

    FLAG_FIELD: ClassVar[str] = "reserved"
    TEXT_FIELDS: ClassVar[Tuple[str, ...]] = ("movie",)
    MUTABLE_FIELDS: ClassVar[Tuple[str, ...]] = ("movie", "seat")

    id: str
    movie: str
    seat: int
    reserved: bool = False
    created_at: int = 0

    def validate(self) -> Optional[str]:
        if not self.movie.strip():
            return "Movie name cannot be empty."
        if not 0 < self.seat <= U64_MAX:
            return "Invalid seat number."
        return None
