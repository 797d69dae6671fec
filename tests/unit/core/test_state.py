"""Tests for state factories and errors."""

import pytest

from parley.core.errors import (
    CallbackError,
    ConfigError,
    ParleyError,
    SlotNotFoundError,
    StateError,
)
from parley.core.state import create_empty_state, restore_state


class TestCreateEmptyState:
    def test_defaults(self):
        state = create_empty_state()
        assert state["message_data"] is None
        assert state["slot_data"] == {}
        assert state["prompted_slot_stack"] == []
        assert state["focused_ability"] is None
        assert state["default_ability"] is None
        assert state["output_message_queue"] == []

    def test_default_ability(self):
        assert create_empty_state("greet")["default_ability"] == "greet"

    def test_states_do_not_share_containers(self):
        a = create_empty_state()
        b = create_empty_state()
        a["slot_data"]["x"] = {}
        assert b["slot_data"] == {}


class TestRestoreState:
    def test_fills_missing_keys(self):
        state = restore_state({"focused_ability": "book_flight"})
        assert state["focused_ability"] == "book_flight"
        assert state["run_on_fill_stack"] == []

    def test_copies_input(self):
        data = {"slot_data": {"a": {"s": 1}}}
        state = restore_state(data)
        state["slot_data"]["a"]["s"] = 2
        assert data["slot_data"]["a"]["s"] == 1

    def test_rejects_unknown_keys(self):
        with pytest.raises(StateError, match="Unknown snapshot keys"):
            restore_state({"flow_stack": []})


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(ConfigError, ParleyError)
        assert issubclass(SlotNotFoundError, ConfigError)
        assert issubclass(StateError, ParleyError)
        assert issubclass(CallbackError, ParleyError)

    def test_slot_not_found_message(self):
        error = SlotNotFoundError("book_flight", "seat")
        assert error.ability_name == "book_flight"
        assert error.slot_name == "seat"
        assert str(error) == "There is no slot 'seat' in ability 'book_flight'"

    def test_callback_error_describes_target(self):
        cause = RuntimeError("boom")
        error = CallbackError("validate", "book_flight", "origin", cause=cause)
        assert str(error) == "validate() failed for book_flight.origin: boom"
        assert CallbackError("on_complete", "book_flight").slot_name is None
