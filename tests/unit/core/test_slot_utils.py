"""Tests for slot utilities."""

from parley.core.slot_utils import (
    deep_merge_slot_data,
    get_slot_status,
    get_slot_value,
    has_slot_value,
    remove_slot_value,
    set_slot_value,
    update_slot_status,
)


class TestDeepMergeSlotData:
    """Tests for deep_merge_slot_data function."""

    def test_merge_empty_new_returns_copy_of_base(self):
        """Test merging empty new dict returns base unchanged."""
        base = {"book_flight": {"origin": "NYC"}}
        result = deep_merge_slot_data(base, {})
        assert result == base
        assert result is not base

    def test_merge_combines_slots_for_same_ability(self):
        """Test slots are merged for the same ability."""
        base = {"book_flight": {"origin": "NYC"}}
        new = {"book_flight": {"destination": "LAX"}}
        result = deep_merge_slot_data(base, new)
        assert result["book_flight"] == {"origin": "NYC", "destination": "LAX"}

    def test_merge_does_not_mutate_base(self):
        """Test base is not mutated."""
        base = {"book_flight": {"origin": "NYC"}}
        deep_merge_slot_data(base, {"book_flight": {"origin": "BOS"}})
        assert base == {"book_flight": {"origin": "NYC"}}

    def test_none_values_overwrite(self):
        """Test None values in new overwrite base values."""
        result = deep_merge_slot_data({"a": {"s": 1}}, {"a": {"s": None}})
        assert result["a"]["s"] is None


class TestSlotValues:
    """Tests for reading and writing single slot values."""

    def test_get_slot_value_defaults(self):
        assert get_slot_value({}, "book_flight", "origin") is None
        assert get_slot_value({}, "book_flight", "origin", default="x") == "x"

    def test_set_slot_value_returns_new_mapping(self):
        data: dict = {}
        result = set_slot_value(data, "book_flight", "origin", "NYC")
        assert result == {"book_flight": {"origin": "NYC"}}
        assert data == {}

    def test_has_slot_value_counts_none_as_stored(self):
        data = {"book_flight": {"origin": None}}
        assert has_slot_value(data, "book_flight", "origin")
        assert not has_slot_value(data, "book_flight", "destination")

    def test_remove_slot_value_drops_empty_ability(self):
        data = {"book_flight": {"origin": "NYC"}}
        result = remove_slot_value(data, "book_flight", "origin")
        assert result == {}
        assert data == {"book_flight": {"origin": "NYC"}}

    def test_remove_missing_slot_is_ignored(self):
        assert remove_slot_value({}, "book_flight", "origin") == {}


class TestSlotStatus:
    """Tests for slot status flags."""

    def test_absent_status_means_enabled_and_not_done(self):
        assert get_slot_status({}, "book_flight", "origin") == {"is_enabled": True, "is_done": False}

    def test_update_keeps_other_flags(self):
        status = update_slot_status({}, "book_flight", "origin", is_enabled=False)
        status = update_slot_status(status, "book_flight", "origin", is_done=True)
        assert status["book_flight"]["origin"] == {"is_enabled": False, "is_done": True}

    def test_update_is_immutable(self):
        original: dict = {}
        update_slot_status(original, "book_flight", "origin", is_done=True)
        assert original == {}
