"""Core snapshot types, named actions and pure reducers."""

from parley.core.actions import Action, parse_action
from parley.core.constants import DEFAULT_SLOT_ORDER, OutputMessageType, PromptReason
from parley.core.reducers import apply_action, apply_actions
from parley.core.state import create_empty_state, restore_state
from parley.core.types import (
    ConversationState,
    Entity,
    MessageData,
    OutputMessage,
    PromptedSlot,
    SlotId,
)

__all__ = [
    "Action",
    "parse_action",
    "apply_action",
    "apply_actions",
    "create_empty_state",
    "restore_state",
    "ConversationState",
    "Entity",
    "MessageData",
    "OutputMessage",
    "PromptedSlot",
    "SlotId",
    "DEFAULT_SLOT_ORDER",
    "OutputMessageType",
    "PromptReason",
]
