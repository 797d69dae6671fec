"""Requests that callbacks hand back to the engine.

Callbacks never touch the snapshot. ``on_fill`` hooks and slot data providers
return these request objects instead, and the engine turns them into named
actions once the callback has returned, in the order they were listed.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class SlotRequest(BaseModel):
    """Base request from a callback to the engine."""

    type: str = Field(..., description="Discriminator field for request type")


class SetSlotValue(SlotRequest):
    """Set the value of any slot, optionally running that slot's on_fill."""

    type: Literal["set_slot_value"] = "set_slot_value"
    ability_name: str
    slot_name: str
    value: Any
    run_on_fill: bool = False


class SetSlotEnabled(SlotRequest):
    """Enable or disable a slot."""

    type: Literal["set_slot_enabled"] = "set_slot_enabled"
    ability_name: str
    slot_name: str
    is_enabled: bool


class SetSlotDone(SlotRequest):
    """Flag a slot as done (or not)."""

    type: Literal["set_slot_done"] = "set_slot_done"
    ability_name: str
    slot_name: str
    is_done: bool = True


class FulfillSlot(SlotRequest):
    """Defer a programmatic fill until the execute stage."""

    type: Literal["fulfill_slot"] = "fulfill_slot"
    ability_name: str
    slot_name: str
    value: Any


class RequireConfirmation(SlotRequest):
    """Ask the user to confirm the current slot through another slot of its ability."""

    type: Literal["require_confirmation"] = "require_confirmation"
    slot_name: str


class AcceptConfirmation(SlotRequest):
    """Accept the slot whose confirmation prompted the current slot."""

    type: Literal["accept_confirmation"] = "accept_confirmation"


class DenyConfirmation(SlotRequest):
    """Deny the slot whose confirmation prompted the current slot."""

    type: Literal["deny_confirmation"] = "deny_confirmation"


class IncomingSlotData(BaseModel):
    """Externally sourced slot value applied during intake without validation."""

    ability_name: str
    slot_name: str
    value: Any


# Requests a host slot data provider may return
ProviderRequest = SetSlotValue | SetSlotEnabled | SetSlotDone | FulfillSlot | IncomingSlotData
