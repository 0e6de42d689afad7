"""Tests for the error taxonomy, result values and identifiers."""

import pytest

from taskstore.errors import AlreadyReserved, InvalidId, NotFound, StoreError, ValidationError
from taskstore.identifiers import is_valid_id, new_id, now_ns
from taskstore.result import Err, Ok


class TestErrors:
    """Tests for StoreError subclasses."""

    def test_codes(self):
        assert NotFound("x").code == "NotFound"
        assert InvalidId("x").code == "InvalidId"
        assert ValidationError("bad").code == "ValidationError"
        assert AlreadyReserved("x").code == "AlreadyReserved"

    def test_messages_name_the_id(self):
        assert str(NotFound("abc")) == "Record with id=abc not found."
        assert str(AlreadyReserved("abc")) == "Ticket with id=abc is already reserved."
        assert "abc" in str(InvalidId("abc"))

    def test_validation_error_keeps_reason(self):
        error = ValidationError("Invalid seat number.")
        assert error.reason == "Invalid seat number."
        assert str(error) == "Invalid seat number."

    def test_all_errors_share_base(self):
        for error in (NotFound("x"), InvalidId("x"), ValidationError("r"), AlreadyReserved("x")):
            assert isinstance(error, StoreError)

    def test_equality_by_kind_and_message(self):
        assert NotFound("a") == NotFound("a")
        assert NotFound("a") != NotFound("b")
        assert NotFound("a") != InvalidId("a")


class TestResult:
    """Tests for Ok and Err."""

    def test_ok(self):
        result = Ok(5)
        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == 5

    def test_err(self):
        result = Err(NotFound("a"))
        assert result.is_err()
        assert not result.is_ok()

    def test_err_unwrap_raises_carried_error(self):
        with pytest.raises(NotFound, match="id=a"):
            Err(NotFound("a")).unwrap()


class TestIdentifiers:
    """Tests for id generation and validation."""

    def test_new_id_is_valid(self):
        assert is_valid_id(new_id())

    def test_new_ids_differ(self):
        assert new_id() != new_id()

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "not-a-uuid",
            "00000000-0000-0000-0000-00000000000",
            "00000000000000000000000000000000",
            "ABCDEF00-0000-0000-0000-000000000000",
            "00000000-0000-0000-0000-000000000000\n",
            None,
            42,
        ],
    )
    def test_rejects_malformed_ids(self, value):
        assert not is_valid_id(value)

    def test_accepts_canonical_uuid(self):
        assert is_valid_id("123e4567-e89b-12d3-a456-426614174000")

    def test_now_ns_is_integer(self):
        assert isinstance(now_ns(), int)
        assert now_ns() > 0
