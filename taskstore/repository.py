"""Record stores for managing task and ticket operations.

This module provides RecordStore, which keeps one kind of record in a
Storage backend and implements creation, retrieval, updates, deletion and
the read-only queries on top of it. TaskStore and TicketStore bind it to
the Task and MovieTicket record types.

Operations that can fail return a Result (Ok or Err) instead of raising.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from taskstore.errors import AlreadyReserved, InvalidId, NotFound, ValidationError
from taskstore.identifiers import Clock, IdGenerator, is_valid_id, new_id, now_ns
from taskstore.models import MovieTicket, Record, SortKey, Task
from taskstore.result import Err, Ok, Result
from taskstore.storage import (
    MAX_KEY_SIZE,
    MAX_VALUE_SIZE,
    JsonStorage,
    Storage,
    key_size,
    payload_size,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


def merge_fields(record: R, changes: Mapping[str, Any]) -> Result:
    """Apply changes to record, allowing only its whitelisted mutable fields.

    Returns:
        Ok with a new record, or Err(ValidationError) naming the first
        rejected field. The input record is never modified.
    """
    for name, value in changes.items():
        if name not in record.MUTABLE_FIELDS:
            return Err(ValidationError(f"Field {name!r} cannot be updated."))
        expected = type(record).field_type(name)
        # bool is a subclass of int; a seat number of True is still a type error
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            return Err(ValidationError(f"Field {name!r} must be of type {expected.__name__}."))
    return Ok(replace(record, **dict(changes)))


class RecordStore(Generic[R]):
    """Store for one kind of record with an ordered key-value backend.

    Attributes:
        storage: Storage backend holding the record payloads
        record_type: Record class kept by this store
    """

    record_type: Type[Record] = Record
    db_env_var = "TASK_DB_PATH"
    default_db_path = "tasks.json"

    def __init__(
        self,
        storage: Optional[Storage] = None,
        id_generator: IdGenerator = new_id,
        clock: Clock = now_ns,
    ):
        """Initialize the store.

        Args:
            storage: Storage implementation to use. If None, uses JsonStorage
                    with the path from db_env_var or default_db_path.
            id_generator: Callable returning a fresh identifier per call
            clock: Callable returning the current time as an integer
        """
        if storage is None:
            storage = JsonStorage(env_var=self.db_env_var, default_path=self.default_db_path)
        self.storage = storage
        self.id_generator = id_generator
        self.clock = clock

    # ---- helpers ----

    def _decode(self, payload: Dict[str, Any]) -> R:
        return self.record_type.from_dict(payload)

    def _check_id(self, id: str) -> Optional[Err]:
        if not is_valid_id(id):
            logger.debug("Rejected malformed id %r", id)
            return Err(InvalidId(id))
        return None

    def _write(self, record: R) -> Result:
        """Validate record and store it under its id."""
        reason = record.validate()
        if reason is not None:
            logger.debug("Rejected %s: %s", record.id, reason)
            return Err(ValidationError(reason))

        payload = record.to_dict()
        if key_size(record.id) > MAX_KEY_SIZE:
            return Err(ValidationError(f"Id exceeds {MAX_KEY_SIZE} bytes."))
        if payload_size(payload) > MAX_VALUE_SIZE:
            return Err(ValidationError(f"Record exceeds {MAX_VALUE_SIZE} bytes."))

        self.storage.insert(record.id, payload)
        return Ok(record)

    def _insert_new(self, **values: Any) -> Result:
        """Build a record with a fresh id and timestamp and store it.

        Raises:
            ValueError: If the id generator returns an id that get and
                       delete would reject
        """
        id = self.id_generator()
        if not is_valid_id(id):
            raise ValueError(f"Id generator returned malformed id {id!r}")
        record = self.record_type(id=id, created_at=self.clock(), **values)
        result = self._write(record)
        if result.is_ok():
            logger.info("Created %s %s", self.record_type.__name__, record.id)
        return result

    # ---- CRUD ----

    def list(self) -> List[R]:
        """Return all records in key order."""
        return [self._decode(payload) for _, payload in self.storage.items()]

    def get(self, id: str) -> Result:
        """Get a specific record by id.

        Returns:
            Ok(record), Err(InvalidId) for a malformed id, or Err(NotFound)
        """
        invalid = self._check_id(id)
        if invalid is not None:
            return invalid

        payload = self.storage.get(id)
        if payload is None:
            return Err(NotFound(id))
        return Ok(self._decode(payload))

    def update(self, id: str, fields: Mapping[str, Any]) -> Result:
        """Replace the supplied fields of an existing record.

        The id and creation time are carried over unchanged. A missing
        record is never created.

        Args:
            id: Identifier of the record to update
            fields: Mapping of field names to new values; only the record
                   type's mutable fields are accepted

        Returns:
            Ok(updated record), or Err with InvalidId, NotFound or
            ValidationError. On Err the store is unchanged.
        """
        current = self.get(id)
        if current.is_err():
            return current

        merged = merge_fields(current.value, fields)
        if merged.is_err():
            return merged

        result = self._write(merged.value)
        if result.is_ok():
            logger.info("Updated %s %s: %s", self.record_type.__name__, id, sorted(fields))
        return result

    def delete(self, id: str) -> Result:
        """Delete a record by id.

        Returns:
            Ok(removed record), Err(InvalidId) or Err(NotFound)
        """
        invalid = self._check_id(id)
        if invalid is not None:
            return invalid

        payload = self.storage.remove(id)
        if payload is None:
            return Err(NotFound(id))

        logger.info("Deleted %s %s", self.record_type.__name__, id)
        return Ok(self._decode(payload))

    # ---- queries ----

    def filter_by_status(self, status: bool) -> List[R]:
        return [record for record in self.list() if record.flag == status]

    def search_by_keyword(self, keyword: str) -> List[R]:
        """Return records whose text fields contain keyword (case-sensitive)."""
        return [
            record
            for record in self.list()
            if any(keyword in getattr(record, name) for name in record.TEXT_FIELDS)
        ]

    def filter_by_time_range(self, start: int, end: int) -> List[R]:
        """Return records created within [start, end], both ends inclusive."""
        return [record for record in self.list() if start <= record.created_at <= end]

    def count(self) -> int:
        return len(self.storage)

    def clear_completed(self) -> None:
        """Delete every record whose flag is set."""
        removed = 0
        for record in self.list():
            if record.flag:
                self.storage.remove(record.id)
                removed += 1
        if removed:
            logger.info("Cleared %d completed %s records", removed, self.record_type.__name__)

    def sort_by(self, key: Union[SortKey, str]) -> List[R]:
        """Return all records sorted by date (oldest first) or status (flagged first).

        Raises:
            ValueError: If key is not a SortKey value
        """
        key = SortKey(key)
        records = self.list()
        if key is SortKey.DATE:
            return sorted(records, key=lambda record: record.created_at)
        return sorted(records, key=lambda record: not record.flag)


class TaskStore(RecordStore[Task]):
    """Store for Task records."""

    record_type = Task

    def create(self, title: str, body: str = "", status: bool = False) -> Result:
        """Create a new task.

        Args:
            title: Task title, may be empty
            body: Free text description
            status: Initial completion flag

        Returns:
            Ok with the created Task, or Err(ValidationError)
        """
        for name, value, expected in (("title", title, str), ("body", body, str), ("status", status, bool)):
            if not isinstance(value, expected):
                return Err(ValidationError(f"Field {name!r} must be of type {expected.__name__}."))
        return self._insert_new(title=title, body=body, status=status)

    def mark_done(self, id: str) -> Result:
        """Mark a task as completed."""
        return self.update(id, {"status": True})


class TicketStore(RecordStore[MovieTicket]):
    """Store for MovieTicket records with a one-way reservation."""

    record_type = MovieTicket
    db_env_var = "TICKET_DB_PATH"
    default_db_path = "tickets.json"

    def create(self, movie: str, seat: int) -> Result:
        """Create a new, unreserved ticket.

        Returns:
            Ok with the created MovieTicket, or Err(ValidationError) for a
            blank movie name or a non-positive seat
        """
        if not isinstance(movie, str):
            return Err(ValidationError("Field 'movie' must be of type str."))
        if not isinstance(seat, int) or isinstance(seat, bool):
            return Err(ValidationError("Invalid seat number."))
        return self._insert_new(movie=movie, seat=seat, reserved=False)

    def reserve(self, id: str) -> Result:
        """Reserve a ticket.

        Returns:
            Ok(reserved ticket), or Err with InvalidId, NotFound or
            AlreadyReserved
        """
        current = self.get(id)
        if current.is_err():
            return current

        ticket = current.value
        if ticket.reserved:
            logger.debug("Ticket %s already reserved", id)
            return Err(AlreadyReserved(id))

        result = self._write(replace(ticket, reserved=True))
        if result.is_ok():
            logger.info("Reserved ticket %s", id)
        return result
