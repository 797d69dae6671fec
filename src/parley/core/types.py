"""Core type definitions for the conversation snapshot.

Everything in the snapshot is plain JSON-friendly data so the host can
persist it without knowing anything about the engine.
"""

from typing import Any, TypedDict

from parley.core.constants import OutputMessageType, PromptReason


class Entity(TypedDict):
    """A structured value recognized by the NLU provider."""

    name: str
    value: Any


class MessageData(TypedDict):
    """NLU result for the current turn."""

    raw_text: str
    intent: str | None
    entities: list[Entity]


class SlotId(TypedDict):
    """Identity of a slot inside an ability."""

    ability_name: str
    slot_name: str


class PromptedSlot(TypedDict):
    """Entry of the prompted slot stack."""

    ability_name: str
    slot_name: str
    reason: PromptReason
    prompted: bool
    turn_count: int
    origin: SlotId | None  # Slot that requested this confirmation


class SlotStatus(TypedDict):
    """Status flags of a slot. Absence from the snapshot means enabled, not done."""

    is_enabled: bool
    is_done: bool


class OutputMessage(TypedDict):
    """A message queued for delivery to the user."""

    message: str
    type: OutputMessageType
    ability_name: str | None
    slot_name: str | None


class RunOnFillItem(TypedDict):
    """Deferred fulfillment request raised by a slot data provider."""

    ability_name: str
    slot_name: str
    value: Any


class ConversationState(TypedDict):
    """Per-conversation snapshot owned by the engine."""

    message_data: MessageData | None
    slot_data: dict[str, dict[str, Any]]
    slot_status: dict[str, dict[str, SlotStatus]]
    ability_status: list[str]
    prompted_slot_stack: list[PromptedSlot]
    focused_ability: str | None
    default_ability: str | None
    output_message_queue: list[OutputMessage]
    filled_slots_on_current_turn: list[SlotId]
    abilities_complete_on_current_turn: list[str]
    run_on_fill_stack: list[RunOnFillItem]


def slot_id(ability_name: str, slot_name: str) -> SlotId:
    """Build a SlotId."""
    return {"ability_name": ability_name, "slot_name": slot_name}


def same_slot(a: SlotId | PromptedSlot, b: SlotId | PromptedSlot) -> bool:
    """Check whether two slot references point at the same slot."""
    return a["ability_name"] == b["ability_name"] and a["slot_name"] == b["slot_name"]
