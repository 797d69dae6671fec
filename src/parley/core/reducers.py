"""Pure state transitions.

``apply_action`` never mutates its input: it returns a new snapshot whose
changed fields are fresh containers. Unchanged fields are shared, so callers
must treat snapshots as read-only.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from parley.core.actions import (
    AbilityCompleted,
    AcceptSlot,
    Action,
    AddMessage,
    AddToRunOnFillStack,
    ClearRunOnFillStack,
    ClearSlot,
    ConfirmSlot,
    DenySlot,
    DisableSlot,
    DrainMessages,
    EnableSlot,
    FillSlot,
    IncrementTurnCount,
    MarkPrompted,
    MarkSlotDone,
    PushPrompt,
    RemovePrompt,
    SetDefaultAbility,
    SetFocusedAbility,
    SetMessageData,
    StartTurn,
)
from parley.core.constants import PromptReason
from parley.core.slot_utils import remove_slot_value, set_slot_value, update_slot_status
from parley.core.types import ConversationState, PromptedSlot, SlotId, same_slot, slot_id

logger = logging.getLogger(__name__)

A = TypeVar("A", bound=Action)
Reducer = Callable[[ConversationState, Any], ConversationState]

_reducers: dict[type[Action], Reducer] = {}


def _reduces(action_type: type[A]) -> Callable[[Callable[[ConversationState, A], ConversationState]], Reducer]:
    def decorator(func: Callable[[ConversationState, A], ConversationState]) -> Reducer:
        _reducers[action_type] = func
        return func

    return decorator


def _update(state: ConversationState, **changes: Any) -> ConversationState:
    return {**state, **changes}  # type: ignore[typeddict-item]


def apply_action(state: ConversationState, action: Action) -> ConversationState:
    """Apply one named mutation and return the new snapshot."""
    reducer = _reducers.get(type(action))
    if reducer is None:
        raise ValueError(f"No reducer registered for action '{action.type}'")
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"apply {action.type}", extra={"action": action.model_dump()})
    return reducer(state, action)


def apply_actions(state: ConversationState, actions: Iterable[Action]) -> ConversationState:
    """Apply mutations in order."""
    for action in actions:
        state = apply_action(state, action)
    return state


# Turn lifecycle


@_reduces(StartTurn)
def _start_turn(state: ConversationState, action: StartTurn) -> ConversationState:
    return _update(state, filled_slots_on_current_turn=[], abilities_complete_on_current_turn=[])


@_reduces(SetMessageData)
def _set_message_data(state: ConversationState, action: SetMessageData) -> ConversationState:
    return _update(
        state,
        message_data={
            "raw_text": action.raw_text,
            "intent": action.intent,
            "entities": [{"name": e["name"], "value": e.get("value")} for e in action.entities],
        },
    )


@_reduces(SetDefaultAbility)
def _set_default_ability(state: ConversationState, action: SetDefaultAbility) -> ConversationState:
    return _update(state, default_ability=action.ability_name)


@_reduces(SetFocusedAbility)
def _set_focused_ability(state: ConversationState, action: SetFocusedAbility) -> ConversationState:
    return _update(state, focused_ability=action.ability_name)


# Slot data and status


@_reduces(FillSlot)
def _fill_slot(state: ConversationState, action: FillSlot) -> ConversationState:
    filled = slot_id(action.ability_name, action.slot_name)
    return _update(
        state,
        slot_data=set_slot_value(state["slot_data"], action.ability_name, action.slot_name, action.value),
        filled_slots_on_current_turn=[*state["filled_slots_on_current_turn"], filled],
    )


@_reduces(ClearSlot)
def _clear_slot(state: ConversationState, action: ClearSlot) -> ConversationState:
    return _update(
        state,
        slot_data=remove_slot_value(state["slot_data"], action.ability_name, action.slot_name),
    )


@_reduces(EnableSlot)
def _enable_slot(state: ConversationState, action: EnableSlot) -> ConversationState:
    return _update(
        state,
        slot_status=update_slot_status(
            state["slot_status"], action.ability_name, action.slot_name, is_enabled=True
        ),
    )


@_reduces(DisableSlot)
def _disable_slot(state: ConversationState, action: DisableSlot) -> ConversationState:
    return _update(
        state,
        slot_status=update_slot_status(
            state["slot_status"], action.ability_name, action.slot_name, is_enabled=False
        ),
    )


@_reduces(MarkSlotDone)
def _mark_slot_done(state: ConversationState, action: MarkSlotDone) -> ConversationState:
    return _update(
        state,
        slot_status=update_slot_status(
            state["slot_status"], action.ability_name, action.slot_name, is_done=action.is_done
        ),
    )


# Output queue


@_reduces(AddMessage)
def _add_message(state: ConversationState, action: AddMessage) -> ConversationState:
    message = {
        "message": action.message,
        "type": action.message_type,
        "ability_name": action.ability_name,
        "slot_name": action.slot_name,
    }
    return _update(state, output_message_queue=[*state["output_message_queue"], message])


@_reduces(DrainMessages)
def _drain_messages(state: ConversationState, action: DrainMessages) -> ConversationState:
    return _update(state, output_message_queue=[])


# Prompted slot stack


def _without(stack: list[PromptedSlot], target: SlotId) -> list[PromptedSlot]:
    return [entry for entry in stack if not same_slot(entry, target)]


def _replace_entry(
    stack: list[PromptedSlot], target: SlotId, **changes: Any
) -> list[PromptedSlot]:
    return [
        {**entry, **changes} if same_slot(entry, target) else entry  # type: ignore[misc]
        for entry in stack
    ]


@_reduces(PushPrompt)
def _push_prompt(state: ConversationState, action: PushPrompt) -> ConversationState:
    target = slot_id(action.ability_name, action.slot_name)
    entry: PromptedSlot = {
        "ability_name": action.ability_name,
        "slot_name": action.slot_name,
        "reason": action.reason,
        "prompted": action.prompted,
        "turn_count": action.turn_count,
        "origin": None,
    }
    stack = _without(state["prompted_slot_stack"], target)
    return _update(state, prompted_slot_stack=[*stack, entry])


@_reduces(RemovePrompt)
def _remove_prompt(state: ConversationState, action: RemovePrompt) -> ConversationState:
    target = slot_id(action.ability_name, action.slot_name)
    return _update(state, prompted_slot_stack=_without(state["prompted_slot_stack"], target))


@_reduces(MarkPrompted)
def _mark_prompted(state: ConversationState, action: MarkPrompted) -> ConversationState:
    target = slot_id(action.ability_name, action.slot_name)
    return _update(
        state,
        prompted_slot_stack=_replace_entry(state["prompted_slot_stack"], target, prompted=True),
    )


@_reduces(IncrementTurnCount)
def _increment_turn_count(state: ConversationState, action: IncrementTurnCount) -> ConversationState:
    target = slot_id(action.ability_name, action.slot_name)
    stack = [
        {**entry, "turn_count": entry.get("turn_count", 0) + 1} if same_slot(entry, target) else entry
        for entry in state["prompted_slot_stack"]
    ]
    return _update(state, prompted_slot_stack=stack)


# Confirmation


@_reduces(ConfirmSlot)
def _confirm_slot(state: ConversationState, action: ConfirmSlot) -> ConversationState:
    target = slot_id(action.target.ability_name, action.target.slot_name)
    entry: PromptedSlot = {
        **target,
        "reason": PromptReason.confirmation,
        "prompted": False,
        "turn_count": 0,
        "origin": slot_id(action.origin.ability_name, action.origin.slot_name),
    }
    stack = _without(state["prompted_slot_stack"], target)
    return _update(state, prompted_slot_stack=[*stack, entry])


@_reduces(AcceptSlot)
def _accept_slot(state: ConversationState, action: AcceptSlot) -> ConversationState:
    return _update(
        state,
        slot_status=update_slot_status(
            state["slot_status"], action.origin.ability_name, action.origin.slot_name, is_done=True
        ),
    )


@_reduces(DenySlot)
def _deny_slot(state: ConversationState, action: DenySlot) -> ConversationState:
    origin = action.origin
    slot_data = remove_slot_value(state["slot_data"], origin.ability_name, origin.slot_name)
    if action.confirming is not None:
        slot_data = remove_slot_value(
            slot_data, action.confirming.ability_name, action.confirming.slot_name
        )
    return _update(
        state,
        slot_data=slot_data,
        slot_status=update_slot_status(
            state["slot_status"], origin.ability_name, origin.slot_name, is_done=False
        ),
    )


# Abilities


@_reduces(AbilityCompleted)
def _ability_completed(state: ConversationState, action: AbilityCompleted) -> ConversationState:
    name = action.ability_name
    ability_status = state["ability_status"]
    if name not in ability_status:
        ability_status = [*ability_status, name]
    focused = None if state["focused_ability"] == name else state["focused_ability"]
    return _update(
        state,
        ability_status=ability_status,
        abilities_complete_on_current_turn=[*state["abilities_complete_on_current_turn"], name],
        prompted_slot_stack=[
            entry for entry in state["prompted_slot_stack"] if entry["ability_name"] != name
        ],
        focused_ability=focused,
    )


# Deferred fulfillment


@_reduces(AddToRunOnFillStack)
def _add_to_run_on_fill_stack(state: ConversationState, action: AddToRunOnFillStack) -> ConversationState:
    item = {"ability_name": action.ability_name, "slot_name": action.slot_name, "value": action.value}
    return _update(state, run_on_fill_stack=[*state["run_on_fill_stack"], item])


@_reduces(ClearRunOnFillStack)
def _clear_run_on_fill_stack(state: ConversationState, action: ClearRunOnFillStack) -> ConversationState:
    return _update(state, run_on_fill_stack=[])
