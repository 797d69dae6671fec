"""Fill stage: resolve the user's message into slot values.

Order of attempts:

1. The active prompt (top of the prompted slot stack) is offered the
   same-named entity value, or the raw text when no such entity exists.
2. Without entities the stage goes straight to the retry check.
3. Entities are matched against slots of the focused ability.
4. When nothing was filled, entities are matched against the ability named
   by the intent, which then takes focus.
5. Retry check: a rejected opportunistic match is retried first; otherwise
   an active prompt that is still unanswered is retried.
"""

import logging
from dataclasses import dataclass
from typing import Any

from parley.abilities.models import Ability
from parley.abilities.registry import AbilityRegistry
from parley.config.models import FillSettings
from parley.core.actions import (
    AbilityCompleted,
    IncrementTurnCount,
    PushPrompt,
    RemovePrompt,
    SetFocusedAbility,
)
from parley.core.constants import PromptReason
from parley.core.reducers import apply_action
from parley.core.selectors import find_prompt_entry, get_prompted_slot, get_slot_turn_count
from parley.core.types import ConversationState, MessageData, PromptedSlot, same_slot
from parley.pipeline.fill import SlotFiller

logger = logging.getLogger(__name__)


@dataclass
class _Rejected:
    ability_name: str
    slot_name: str
    value: Any


@dataclass
class _MatchOutcome:
    found: bool = False
    filled: bool = False
    rejected: _Rejected | None = None


def candidate_value(prompt: PromptedSlot, message: MessageData) -> Any:
    """Value offered to the active prompt: matching entity, else raw text."""
    for entity in message["entities"]:
        if entity["name"] == prompt["slot_name"]:
            return entity["value"]
    return message["raw_text"]


async def fill_slot(
    state: ConversationState,
    abilities: AbilityRegistry,
    settings: FillSettings | None = None,
    conversation: Any = None,
) -> ConversationState:
    """Run the fill stage and return the new snapshot."""
    filler = SlotFiller(abilities, settings, conversation)
    message: MessageData = state["message_data"] or {"raw_text": "", "intent": None, "entities": []}

    active = get_prompted_slot(state)
    if active is not None:
        slot = abilities.get_slot(active["ability_name"], active["slot_name"])
        if slot is None:
            logger.warning(
                f"Dropping stale prompt for {active['ability_name']}.{active['slot_name']}"
            )
            state = apply_action(
                state,
                RemovePrompt(ability_name=active["ability_name"], slot_name=active["slot_name"]),
            )
            active = None
        else:
            state, filled = await filler.validate_and_fill(
                state, active["ability_name"], slot, candidate_value(active, message)
            )
            if filled:
                return apply_action(
                    state,
                    RemovePrompt(ability_name=active["ability_name"], slot_name=active["slot_name"]),
                )

    intent_ability = abilities.get(message["intent"])
    if state["focused_ability"] is None and intent_ability is not None:
        state = apply_action(state, SetFocusedAbility(ability_name=intent_ability.name))

    outcome = _MatchOutcome()
    if not message["entities"]:
        # Slotless abilities need no entities to complete
        if intent_ability is not None and not intent_ability.slots:
            return apply_action(state, AbilityCompleted(ability_name=intent_ability.name))
        return await _retry_check(state, filler, abilities, active, message, outcome)

    focused = abilities.get(state["focused_ability"])
    if focused is not None:
        if not focused.slots:
            return apply_action(state, AbilityCompleted(ability_name=focused.name))
        state = await _match_entities(state, filler, focused, message, active, outcome)

    if not outcome.filled and intent_ability is not None and intent_ability is not focused:
        if not intent_ability.slots:
            return apply_action(state, AbilityCompleted(ability_name=intent_ability.name))
        found_before = outcome.found
        outcome.found = False
        state = await _match_entities(state, filler, intent_ability, message, active, outcome)
        if outcome.found:
            state = apply_action(state, SetFocusedAbility(ability_name=intent_ability.name))
        outcome.found = outcome.found or found_before

    return await _retry_check(state, filler, abilities, active, message, outcome)


async def _match_entities(
    state: ConversationState,
    filler: SlotFiller,
    ability: Ability,
    message: MessageData,
    active: PromptedSlot | None,
    outcome: _MatchOutcome,
) -> ConversationState:
    """Try every entity that names a slot of ``ability``, each slot once."""
    attempted: set[str] = set()
    for entity in message["entities"]:
        slot = ability.get_slot(entity["name"])
        if slot is None or slot.name in attempted:
            continue
        attempted.add(slot.name)
        if active is not None and active["ability_name"] == ability.name and active["slot_name"] == slot.name:
            # Already offered to the active prompt
            continue
        outcome.found = True
        state, filled = await filler.validate_and_fill(state, ability.name, slot, entity["value"])
        if filled:
            outcome.filled = True
        elif outcome.rejected is None:
            outcome.rejected = _Rejected(ability.name, slot.name, entity["value"])
    return state


async def _retry_check(
    state: ConversationState,
    filler: SlotFiller,
    abilities: AbilityRegistry,
    active: PromptedSlot | None,
    message: MessageData,
    outcome: _MatchOutcome,
) -> ConversationState:
    if outcome.found and not outcome.filled and outcome.rejected is not None:
        rejected = outcome.rejected
        slot = abilities.get_slot(rejected.ability_name, rejected.slot_name)
        turn_count = get_slot_turn_count(state, rejected.ability_name, rejected.slot_name) + 1
        state = await filler.retry_message(state, rejected.ability_name, slot, rejected.value, turn_count)
        return apply_action(
            state,
            PushPrompt(
                ability_name=rejected.ability_name,
                slot_name=rejected.slot_name,
                reason=PromptReason.query,
                prompted=True,
                turn_count=turn_count,
            ),
        )

    if active is None or find_prompt_entry(state, active["ability_name"], active["slot_name"]) is None:
        return state

    if any(same_slot(active, filled) for filled in state["filled_slots_on_current_turn"]):
        # Answered indirectly by another slot's on_fill
        return apply_action(
            state, RemovePrompt(ability_name=active["ability_name"], slot_name=active["slot_name"])
        )

    state = apply_action(
        state,
        IncrementTurnCount(ability_name=active["ability_name"], slot_name=active["slot_name"]),
    )
    slot = abilities.get_slot(active["ability_name"], active["slot_name"])
    turn_count = get_slot_turn_count(state, active["ability_name"], active["slot_name"])
    return await filler.retry_message(
        state, active["ability_name"], slot, candidate_value(active, message), turn_count
    )
