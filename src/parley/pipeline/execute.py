"""Execute stage: deferred fills, then completions or the next slot query.

Deferred fills run first, so completion messages are always the last ones
queued in a turn.
"""

import logging
from typing import Any

from parley.abilities.registry import AbilityRegistry
from parley.config.models import FillSettings
from parley.core.actions import (
    AddMessage,
    ClearRunOnFillStack,
    MarkPrompted,
    RemovePrompt,
    SetFocusedAbility,
)
from parley.core.constants import OutputMessageType
from parley.core.errors import ConfigError
from parley.core.reducers import apply_action
from parley.core.selectors import get_prompted_slot
from parley.core.types import ConversationState
from parley.pipeline.callbacks import build_context, run_on_complete, run_query
from parley.pipeline.fill import SlotFiller

logger = logging.getLogger(__name__)


async def execute(
    state: ConversationState,
    abilities: AbilityRegistry,
    settings: FillSettings | None = None,
    conversation: Any = None,
) -> ConversationState:
    """Run the execute stage and return the new snapshot."""
    state = await drain_run_on_fill_stack(state, SlotFiller(abilities, settings, conversation))
    if not state["abilities_complete_on_current_turn"]:
        return await _query_top(state, abilities, conversation)
    for name in state["abilities_complete_on_current_turn"]:
        state = await _complete(state, abilities, name, conversation)
    return state


async def _complete(
    state: ConversationState, abilities: AbilityRegistry, name: str, conversation: Any
) -> ConversationState:
    ability = abilities.get(name)
    if ability is None:
        return state
    result = await run_on_complete(ability, build_context(state, conversation, name))
    for text in result.messages:
        state = apply_action(
            state,
            AddMessage(message=text, message_type=OutputMessageType.ability_complete, ability_name=name),
        )
    if result.next_ability is not None:
        if result.next_ability in abilities:
            state = apply_action(state, SetFocusedAbility(ability_name=result.next_ability))
        else:
            logger.warning(f"Ability '{name}' handed over to unknown ability '{result.next_ability}'")
    return state


async def _query_top(
    state: ConversationState, abilities: AbilityRegistry, conversation: Any
) -> ConversationState:
    top = get_prompted_slot(state)
    if top is None or top["prompted"]:
        return state
    ability_name, slot_name = top["ability_name"], top["slot_name"]
    slot = abilities.get_slot(ability_name, slot_name)
    if slot is None:
        logger.warning(f"Dropping stale prompt for {ability_name}.{slot_name}")
        return apply_action(state, RemovePrompt(ability_name=ability_name, slot_name=slot_name))

    text = await run_query(slot, build_context(state, conversation, ability_name, slot_name))
    state = apply_action(
        state,
        AddMessage(
            message=text,
            message_type=OutputMessageType.query,
            ability_name=ability_name,
            slot_name=slot_name,
        ),
    )
    return apply_action(state, MarkPrompted(ability_name=ability_name, slot_name=slot_name))


async def drain_run_on_fill_stack(state: ConversationState, filler: SlotFiller) -> ConversationState:
    """Fill every deferred slot in request order, running on_fill without validation.

    Requests for unknown slots are dropped. Fills queued while draining are
    processed in further rounds, bounded by the chain depth setting.
    """
    rounds = 0
    while state["run_on_fill_stack"]:
        rounds += 1
        if rounds > filler.settings.max_chain_depth:
            raise ConfigError(
                f"Deferred fills still pending after {filler.settings.max_chain_depth} rounds"
            )
        items = state["run_on_fill_stack"]
        state = apply_action(state, ClearRunOnFillStack())
        for item in items:
            slot = filler.abilities.get_slot(item["ability_name"], item["slot_name"])
            if slot is None:
                logger.debug(
                    f"Dropping deferred fill for unknown slot {item['ability_name']}.{item['slot_name']}"
                )
                continue
            state = await filler.fill(state, item["ability_name"], slot, item["value"])
    return state
