"""Utilities for slot data manipulation.

This module is the single source of truth for reading and writing the
``{ability_name: {slot_name: value}}`` mappings held in the snapshot.
All writers are immutable: they return a new mapping and never touch the input.
"""

from copy import deepcopy
from typing import Any

from parley.core.types import SlotStatus


def deep_merge_slot_data(
    base: dict[str, dict[str, Any]],
    new: dict[str, dict[str, Any]],
) -> dict[str, dict[str, Any]]:
    """Merge per-ability slot dictionaries.

    Example:
        >>> base = {"book_flight": {"origin": "NYC"}}
        >>> new = {"book_flight": {"destination": "LAX"}, "greet": {"name": "Ana"}}
        >>> deep_merge_slot_data(base, new)
        {'book_flight': {'origin': 'NYC', 'destination': 'LAX'}, 'greet': {'name': 'Ana'}}

    Notes:
        - New ability names are added to the result
        - For existing abilities, slots are merged (not replaced)
        - None values in ``new`` DO overwrite base values
    """
    result = deepcopy(base)
    for ability_name, slots in new.items():
        result[ability_name] = {**result.get(ability_name, {}), **slots}
    return result


def get_slot_value(
    slot_data: dict[str, dict[str, Any]],
    ability_name: str,
    slot_name: str,
    default: Any = None,
) -> Any:
    """Get a slot value safely with default."""
    return slot_data.get(ability_name, {}).get(slot_name, default)


def has_slot_value(slot_data: dict[str, dict[str, Any]], ability_name: str, slot_name: str) -> bool:
    """Check whether a slot has a stored value (None counts as stored)."""
    return slot_name in slot_data.get(ability_name, {})


def set_slot_value(
    slot_data: dict[str, dict[str, Any]],
    ability_name: str,
    slot_name: str,
    value: Any,
) -> dict[str, dict[str, Any]]:
    """Set a slot value immutably."""
    return deep_merge_slot_data(slot_data, {ability_name: {slot_name: value}})


def remove_slot_value(
    slot_data: dict[str, dict[str, Any]],
    ability_name: str,
    slot_name: str,
) -> dict[str, dict[str, Any]]:
    """Remove a slot value immutably. Missing slots are ignored."""
    result = deepcopy(slot_data)
    slots = result.get(ability_name)
    if slots is not None:
        slots.pop(slot_name, None)
        if not slots:
            del result[ability_name]
    return result


def get_slot_status(
    slot_status: dict[str, dict[str, SlotStatus]],
    ability_name: str,
    slot_name: str,
) -> SlotStatus:
    """Get the status of a slot, defaulting to enabled and not done."""
    status = slot_status.get(ability_name, {}).get(slot_name)
    if status is None:
        return {"is_enabled": True, "is_done": False}
    return {"is_enabled": status.get("is_enabled", True), "is_done": status.get("is_done", False)}


def update_slot_status(
    slot_status: dict[str, dict[str, SlotStatus]],
    ability_name: str,
    slot_name: str,
    **changes: bool,
) -> dict[str, dict[str, SlotStatus]]:
    """Update status flags of a slot immutably."""
    current = get_slot_status(slot_status, ability_name, slot_name)
    updated: SlotStatus = {**current, **changes}  # type: ignore[typeddict-item]
    result = deepcopy(slot_status)
    result.setdefault(ability_name, {})[slot_name] = updated
    return result
