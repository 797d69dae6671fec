"""Read-only queries over a conversation snapshot."""

from parley.abilities.models import Ability, Slot
from parley.core.constants import PromptReason
from parley.core.slot_utils import has_slot_value
from parley.core.types import ConversationState, PromptedSlot, SlotId, same_slot, slot_id


def is_prompt_status(state: ConversationState) -> bool:
    """Check whether a slot is awaiting an answer."""
    return len(state["prompted_slot_stack"]) > 0


def get_prompted_slot(state: ConversationState) -> PromptedSlot | None:
    """Get the active prompt (top of the prompted slot stack)."""
    stack = state["prompted_slot_stack"]
    return stack[-1] if stack else None


def find_prompt_entry(
    state: ConversationState, ability_name: str, slot_name: str
) -> PromptedSlot | None:
    """Find the stack entry of a slot, searching from the top."""
    target = slot_id(ability_name, slot_name)
    for entry in reversed(state["prompted_slot_stack"]):
        if same_slot(entry, target):
            return entry
    return None


def get_slot_turn_count(state: ConversationState, ability_name: str, slot_name: str) -> int:
    """Number of retries already issued for a prompted slot (0 when not prompted)."""
    entry = find_prompt_entry(state, ability_name, slot_name)
    return entry["turn_count"] if entry else 0


def get_requesting_slot_id(
    state: ConversationState, ability_name: str, slot_name: str
) -> SlotId | None:
    """Get the slot whose confirmation caused ``slot_name`` to be prompted."""
    entry = find_prompt_entry(state, ability_name, slot_name)
    if entry is None or entry["reason"] != PromptReason.confirmation:
        return None
    return entry.get("origin")


def is_slot_enabled(state: ConversationState, ability_name: str, slot: Slot) -> bool:
    """Check the enabled flag, falling back to the slot's default."""
    status = state["slot_status"].get(ability_name, {}).get(slot.name)
    if status is None or "is_enabled" not in status:
        return slot.default_is_enabled
    return status["is_enabled"]


def get_unfilled_enabled_slots(state: ConversationState, ability: Ability | None) -> list[Slot]:
    """Slots of ``ability`` that have no stored value and are not disabled.

    Declaration order is preserved.
    """
    if ability is None:
        return []
    return [
        slot
        for slot in ability.slots
        if not has_slot_value(state["slot_data"], ability.name, slot.name)
        and is_slot_enabled(state, ability.name, slot)
    ]
