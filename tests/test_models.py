"""Tests for core models."""

import dataclasses

import pytest

from taskstore.models import U64_MAX, MovieTicket, SortKey, Task

TASK_ID = "00000000-0000-0000-0000-000000000001"


class TestSortKey:
    """Tests for SortKey enum."""

    def test_sort_key_values(self):
        """Test that SortKey enum has correct values."""
        assert SortKey.DATE.value == "date"
        assert SortKey.STATUS.value == "status"

    def test_sort_key_from_string(self):
        """Test that SortKey can be built from its string value."""
        assert SortKey("date") is SortKey.DATE
        assert SortKey("status") is SortKey.STATUS

    def test_unknown_sort_key_raises(self):
        with pytest.raises(ValueError):
            SortKey("title")


class TestTask:
    """Tests for Task dataclass."""

    def test_task_defaults(self):
        """Test creating a task with only id and title."""
        task = Task(id=TASK_ID, title="Buy milk")

        assert task.title == "Buy milk"
        assert task.body == ""
        assert task.status is False
        assert task.created_at == 0

    def test_task_is_immutable(self):
        """Test that tasks cannot be modified in place."""
        task = Task(id=TASK_ID, title="Buy milk")

        with pytest.raises(dataclasses.FrozenInstanceError):
            task.status = True

    def test_flag_follows_status(self):
        assert Task(id=TASK_ID, title="t").flag is False
        assert Task(id=TASK_ID, title="t", status=True).flag is True

    def test_empty_title_is_valid(self):
        assert Task(id=TASK_ID, title="").validate() is None

    def test_to_dict(self):
        task = Task(id=TASK_ID, title="Buy milk", body="2 litres", status=True, created_at=42)

        assert task.to_dict() == {
            "id": TASK_ID,
            "title": "Buy milk",
            "body": "2 litres",
            "status": True,
            "created_at": 42,
        }

    def test_from_dict_ignores_unknown_keys(self):
        """Test that payload keys with no matching field are dropped."""
        task = Task.from_dict({"id": TASK_ID, "title": "t", "legacy": "x"})

        assert task == Task(id=TASK_ID, title="t")

    def test_task_equality(self):
        """Test that tasks with the same fields compare equal."""
        task1 = Task(id=TASK_ID, title="Same", created_at=1)
        task2 = Task(id=TASK_ID, title="Same", created_at=1)
        assert task1 == task2

    def test_field_metadata(self):
        assert Task.FLAG_FIELD == "status"
        assert Task.TEXT_FIELDS == ("title", "body")
        assert "id" not in Task.MUTABLE_FIELDS
        assert "created_at" not in Task.MUTABLE_FIELDS

    def test_field_type(self):
        assert Task.field_type("status") is bool
        assert Task.field_type("title") is str


class TestMovieTicket:
    """Tests for MovieTicket dataclass."""

    def test_ticket_defaults(self):
        ticket = MovieTicket(id=TASK_ID, movie="Alien", seat=12)

        assert ticket.reserved is False
        assert ticket.flag is False

    def test_valid_ticket(self):
        assert MovieTicket(id=TASK_ID, movie="Alien", seat=1).validate() is None

    @pytest.mark.parametrize("movie", ["", "   "])
    def test_blank_movie_is_invalid(self, movie):
        ticket = MovieTicket(id=TASK_ID, movie=movie, seat=1)
        assert ticket.validate() == "Movie name cannot be empty."

    @pytest.mark.parametrize("seat", [0, -3, U64_MAX + 1])
    def test_out_of_range_seat_is_invalid(self, seat):
        ticket = MovieTicket(id=TASK_ID, movie="Alien", seat=seat)
        assert ticket.validate() == "Invalid seat number."

    def test_largest_seat_is_valid(self):
        assert MovieTicket(id=TASK_ID, movie="Alien", seat=U64_MAX).validate() is None

    def test_reserved_is_not_updatable(self):
        assert "reserved" not in MovieTicket.MUTABLE_FIELDS
        assert MovieTicket.FLAG_FIELD == "reserved"
