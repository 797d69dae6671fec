"""Named state mutations.

Every change to a conversation snapshot is expressed as one of these actions
and applied by ``parley.core.reducers.apply_action``. Actions serialize to
plain dicts, so a turn can be logged, inspected and replayed.
"""

from typing import Any, ClassVar, Literal, Type

from pydantic import BaseModel, Field

from parley.core.constants import OutputMessageType, PromptReason


class SlotRef(BaseModel):
    """Reference to a slot of an ability."""

    ability_name: str
    slot_name: str


class Action(BaseModel):
    """Base state mutation.

    Uses registry pattern for automatic parsing.
    """

    type: str = Field(..., description="Discriminator field for action type")

    # Registry for all action subclasses
    _registry: ClassVar[dict[str, Type["Action"]]] = {}

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        """Automatically register subclasses based on type field default."""
        super().__pydantic_init_subclass__(**kwargs)
        default = cls.model_fields["type"].default
        if isinstance(default, str):
            Action._registry[default] = cls

    @classmethod
    def parse(cls, data: dict[str, Any]) -> "Action":
        """Parse a dictionary into a typed Action using the registry."""
        action_type = data.get("type")
        if not action_type:
            raise ValueError("Action data missing 'type' field")

        action_class = cls._registry.get(action_type)
        if not action_class:
            raise ValueError(f"Unknown action type: {action_type}")

        return action_class(**data)


class SlotAction(Action):
    """Action addressed to a single slot."""

    ability_name: str
    slot_name: str


# Turn lifecycle


class StartTurn(Action):
    """Reset the per-turn ephemeral fields."""

    type: Literal["start_turn"] = "start_turn"


class SetMessageData(Action):
    """Store this turn's NLU result."""

    type: Literal["set_message_data"] = "set_message_data"
    raw_text: str = ""
    intent: str | None = None
    entities: list[dict[str, Any]] = Field(default_factory=list)


class SetDefaultAbility(Action):
    type: Literal["set_default_ability"] = "set_default_ability"
    ability_name: str | None


class SetFocusedAbility(Action):
    type: Literal["set_focused_ability"] = "set_focused_ability"
    ability_name: str | None


# Slot data and status


class FillSlot(SlotAction):
    """Store a slot value and record the fill for this turn."""

    type: Literal["fill_slot"] = "fill_slot"
    value: Any = None


class ClearSlot(SlotAction):
    type: Literal["clear_slot"] = "clear_slot"


class EnableSlot(SlotAction):
    type: Literal["enable_slot"] = "enable_slot"


class DisableSlot(SlotAction):
    type: Literal["disable_slot"] = "disable_slot"


class MarkSlotDone(SlotAction):
    type: Literal["set_slot_done"] = "set_slot_done"
    is_done: bool = True


# Output queue


class AddMessage(Action):
    type: Literal["add_message"] = "add_message"
    message: str
    message_type: OutputMessageType
    ability_name: str | None = None
    slot_name: str | None = None


class DrainMessages(Action):
    type: Literal["drain_messages"] = "drain_messages"


# Prompted slot stack


class PushPrompt(SlotAction):
    """Push a slot on top of the prompted slot stack.

    An existing entry for the same slot is moved to the top.
    """

    type: Literal["push_prompt"] = "push_prompt"
    reason: PromptReason = PromptReason.query
    prompted: bool = False
    turn_count: int = 0


class RemovePrompt(SlotAction):
    type: Literal["remove_prompt"] = "remove_prompt"


class MarkPrompted(SlotAction):
    type: Literal["mark_prompted"] = "mark_prompted"


class IncrementTurnCount(SlotAction):
    type: Literal["increment_turn_count"] = "increment_turn_count"


# Confirmation


class ConfirmSlot(Action):
    """Ask the user to confirm ``origin`` through the ``target`` slot."""

    type: Literal["confirm_slot"] = "confirm_slot"
    origin: SlotRef
    target: SlotRef


class AcceptSlot(Action):
    type: Literal["accept_slot"] = "accept_slot"
    origin: SlotRef


class DenySlot(Action):
    """Reject a confirmation: the origin and the confirming slot are asked again."""

    type: Literal["deny_slot"] = "deny_slot"
    origin: SlotRef
    confirming: SlotRef | None = None


# Abilities


class AbilityCompleted(Action):
    type: Literal["ability_completed"] = "ability_completed"
    ability_name: str


# Deferred fulfillment


class AddToRunOnFillStack(SlotAction):
    type: Literal["add_to_run_on_fill_stack"] = "add_to_run_on_fill_stack"
    value: Any = None


class ClearRunOnFillStack(Action):
    type: Literal["clear_run_on_fill_stack"] = "clear_run_on_fill_stack"


def parse_action(data: dict[str, Any]) -> Action:
    """Parse a serialized action dict back to an Action object."""
    return Action.parse(data)
