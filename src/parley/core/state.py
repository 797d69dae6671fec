"""State factory functions."""

from copy import deepcopy
from typing import Any

from parley.core.errors import StateError
from parley.core.types import ConversationState


def create_empty_state(default_ability: str | None = None) -> ConversationState:
    """Create the snapshot for a new conversation."""
    return {
        "message_data": None,
        "slot_data": {},
        "slot_status": {},
        "ability_status": [],
        "prompted_slot_stack": [],
        "focused_ability": None,
        "default_ability": default_ability,
        "output_message_queue": [],
        "filled_slots_on_current_turn": [],
        "abilities_complete_on_current_turn": [],
        "run_on_fill_stack": [],
    }


def restore_state(data: dict[str, Any]) -> ConversationState:
    """Rebuild a snapshot handed back by the host.

    Missing keys are filled with defaults, unknown keys are rejected.

    Raises:
        StateError: If the data contains keys the engine does not know.
    """
    state = create_empty_state()
    unknown = set(data) - set(state)
    if unknown:
        raise StateError(f"Unknown snapshot keys: {sorted(unknown)}")
    state.update(deepcopy(data))  # type: ignore[typeddict-item]
    return state
