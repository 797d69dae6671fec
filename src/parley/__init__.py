"""parley - turn-based slot-filling dialogue engine.

Given the NLU result of one user message, parley decides which piece of
information to ask for next, fills slots from recognized entities, tracks
ability completion and returns the messages to send back.

Quick start:
    from parley import Ability, DialogueEngine, Slot

    book = Ability(
        name="book_flight",
        slots=[Slot(name="origin", query=lambda ctx: "Where from?")],
        on_complete=lambda ctx: f"Booked from {ctx.get_slot_value('origin')}",
    )
    engine = DialogueEngine([book])
    messages = await engine.process_turn("user-1", {"raw_text": "", "intent": "book_flight"})
"""

from parley.__version__ import __version__

from parley.abilities import (
    Ability,
    AbilityRegistry,
    AcceptConfirmation,
    CompletionResult,
    DenyConfirmation,
    FulfillSlot,
    IncomingSlotData,
    OnFillResult,
    RequireConfirmation,
    SetSlotDone,
    SetSlotEnabled,
    SetSlotValue,
    Slot,
    SlotContext,
    ValidateResult,
)
from parley.abilities.builder import build_abilities
from parley.config import ConfigLoader, ParleyConfig, Settings
from parley.core.errors import (
    CallbackError,
    ConfigError,
    ParleyError,
    SlotNotFoundError,
    StateError,
)
from parley.core.nlu import NLUEntity, NLUResult
from parley.core.types import ConversationState, OutputMessage
from parley.runtime import ConversationStore, DialogueEngine, InMemoryConversationStore

__all__ = [
    "__version__",
    # Engine
    "DialogueEngine",
    "ConversationStore",
    "InMemoryConversationStore",
    "NLUEntity",
    "NLUResult",
    "ConversationState",
    "OutputMessage",
    # Abilities
    "Ability",
    "AbilityRegistry",
    "Slot",
    "SlotContext",
    "ValidateResult",
    "OnFillResult",
    "CompletionResult",
    "SetSlotValue",
    "SetSlotEnabled",
    "SetSlotDone",
    "FulfillSlot",
    "IncomingSlotData",
    "RequireConfirmation",
    "AcceptConfirmation",
    "DenyConfirmation",
    "build_abilities",
    # Config
    "ConfigLoader",
    "ParleyConfig",
    "Settings",
    # Errors
    "ParleyError",
    "ConfigError",
    "SlotNotFoundError",
    "CallbackError",
    "StateError",
]
