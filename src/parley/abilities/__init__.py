"""Abilities, slots and the requests their callbacks return."""

from parley.abilities.models import (
    Ability,
    CompletionResult,
    OnFillResult,
    Slot,
    SlotContext,
    ValidateResult,
)
from parley.abilities.registry import AbilityRegistry
from parley.abilities.requests import (
    AcceptConfirmation,
    DenyConfirmation,
    FulfillSlot,
    IncomingSlotData,
    ProviderRequest,
    RequireConfirmation,
    SetSlotDone,
    SetSlotEnabled,
    SetSlotValue,
    SlotRequest,
)

__all__ = [
    "Ability",
    "AbilityRegistry",
    "CompletionResult",
    "OnFillResult",
    "Slot",
    "SlotContext",
    "ValidateResult",
    "AcceptConfirmation",
    "DenyConfirmation",
    "FulfillSlot",
    "IncomingSlotData",
    "ProviderRequest",
    "RequireConfirmation",
    "SetSlotDone",
    "SetSlotEnabled",
    "SetSlotValue",
    "SlotRequest",
]
