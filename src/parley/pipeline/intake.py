"""Intake stage: record the turn's input and apply externally sourced slot data."""

import logging
from collections.abc import Iterable

from parley.abilities.registry import AbilityRegistry
from parley.abilities.requests import (
    FulfillSlot,
    IncomingSlotData,
    ProviderRequest,
    SetSlotDone,
    SetSlotEnabled,
    SetSlotValue,
)
from parley.core.actions import (
    Action,
    AddToRunOnFillStack,
    DisableSlot,
    EnableSlot,
    FillSlot,
    MarkSlotDone,
    SetDefaultAbility,
    SetMessageData,
    StartTurn,
)
from parley.core.errors import SlotNotFoundError
from parley.core.reducers import apply_action, apply_actions
from parley.core.slot_utils import get_slot_value, has_slot_value
from parley.core.types import ConversationState, MessageData

logger = logging.getLogger(__name__)


def intake(
    state: ConversationState,
    message: MessageData | None,
    abilities: AbilityRegistry,
    incoming: Iterable[ProviderRequest] = (),
    default_ability: str | None = None,
) -> ConversationState:
    """Start a turn.

    Clears the per-turn bookkeeping, stores the NLU result, records the
    default ability when none is set yet, and applies provider data without
    validation or on_fill. Deferred fills are pushed to the run-on-fill stack.
    A provider value equal to the stored one is skipped, so data re-sent on
    every turn does not count as a fill and cannot complete an ability again.
    """
    message = message or {"raw_text": "", "intent": None, "entities": []}
    actions: list[Action] = [
        StartTurn(),
        SetMessageData(
            raw_text=message["raw_text"],
            intent=message["intent"],
            entities=list(message["entities"]),
        ),
    ]
    if state["default_ability"] is None and default_ability is not None:
        actions.append(SetDefaultAbility(ability_name=default_ability))
    state = apply_actions(state, actions)

    for item in incoming:
        action = _incoming_action(item, abilities)
        if action is None:
            logger.debug(
                f"Dropping incoming {type(item).__name__} for unknown slot "
                f"{item.ability_name}.{item.slot_name}"
            )
            continue
        if isinstance(action, FillSlot) and _unchanged(state, action):
            # Re-sent provider data is not a fill of this turn
            continue
        state = apply_action(state, action)
    return state


def _incoming_action(item: ProviderRequest, abilities: AbilityRegistry) -> Action | None:
    known = abilities.get_slot(item.ability_name, item.slot_name) is not None

    if isinstance(item, FulfillSlot) or (isinstance(item, SetSlotValue) and item.run_on_fill):
        if not known and isinstance(item, SetSlotValue):
            raise SlotNotFoundError(item.ability_name, item.slot_name)
        return AddToRunOnFillStack(
            ability_name=item.ability_name, slot_name=item.slot_name, value=item.value
        )
    if not known:
        return None
    if isinstance(item, (IncomingSlotData, SetSlotValue)):
        return FillSlot(ability_name=item.ability_name, slot_name=item.slot_name, value=item.value)
    if isinstance(item, SetSlotEnabled):
        action_cls = EnableSlot if item.is_enabled else DisableSlot
        return action_cls(ability_name=item.ability_name, slot_name=item.slot_name)
    if isinstance(item, SetSlotDone):
        return MarkSlotDone(
            ability_name=item.ability_name, slot_name=item.slot_name, is_done=item.is_done
        )
    raise TypeError(f"Unsupported incoming slot data: {type(item).__name__}")


def _unchanged(state: ConversationState, action: FillSlot) -> bool:
    slot_data = state["slot_data"]
    return has_slot_value(slot_data, action.ability_name, action.slot_name) and (
        get_slot_value(slot_data, action.ability_name, action.slot_name) == action.value
    )
