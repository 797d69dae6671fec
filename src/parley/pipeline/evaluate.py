"""Evaluate stage: decide whether an ability completed or what to ask next."""

import logging

from parley.abilities.registry import AbilityRegistry
from parley.core.actions import AbilityCompleted, PushPrompt, SetFocusedAbility
from parley.core.constants import PromptReason
from parley.core.reducers import apply_action
from parley.core.selectors import get_unfilled_enabled_slots, is_prompt_status
from parley.core.types import ConversationState

logger = logging.getLogger(__name__)


def evaluate(state: ConversationState, abilities: AbilityRegistry) -> ConversationState:
    """Run the evaluate stage and return the new snapshot.

    Completion is checked for abilities touched by this turn's fills, in
    fill order, and at most one ability completes here. When nothing is
    pending on the prompt stack, the lowest-order unfilled enabled slot of
    the focused (or default) ability is queued for a query; ties go to the
    slot declared first.
    """
    if state["abilities_complete_on_current_turn"]:
        return state

    for filled in state["filled_slots_on_current_turn"]:
        ability = abilities.get(filled["ability_name"])
        if ability is not None and not get_unfilled_enabled_slots(state, ability):
            logger.info(f"Ability '{ability.name}' completed")
            return apply_action(state, AbilityCompleted(ability_name=ability.name))

    if is_prompt_status(state):
        return state

    focused = state["focused_ability"]
    if focused is None:
        focused = state["default_ability"]
        if focused is None:
            return state
        state = apply_action(state, SetFocusedAbility(ability_name=focused))

    unfilled = get_unfilled_enabled_slots(state, abilities.get(focused))
    if not unfilled:
        return state
    # min() keeps the first of equal keys
    next_slot = min(unfilled, key=lambda slot: slot.order)
    return apply_action(
        state,
        PushPrompt(ability_name=focused, slot_name=next_slot.name, reason=PromptReason.query),
    )
