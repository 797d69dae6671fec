"""Core constants and enums."""

from enum import Enum

# Prompt priority for slots that do not declare an order
DEFAULT_SLOT_ORDER = 100


class PromptReason(str, Enum):
    """Why a slot sits on the prompted slot stack."""

    query = "query"
    confirmation = "confirmation"


class OutputMessageType(str, Enum):
    """Origin of an outbound message."""

    query = "query"
    retry = "retry"
    validate_reason = "validate_reason"
    slot_fill = "slot_fill"
    ability_complete = "ability_complete"
