"""Validate-and-fill protocol shared by the fill and execute stages.

A fill runs the slot's on_fill hook, stores the submitted value, applies the
hook's requests in order and finally queues the hook's text, which replaces
the stored value unless ``store_fill_message`` is off. Requests are turned
into named actions only after the hook has returned.
"""

import logging
from typing import Any

from parley.abilities.models import Slot
from parley.abilities.registry import AbilityRegistry
from parley.abilities.requests import (
    AcceptConfirmation,
    DenyConfirmation,
    FulfillSlot,
    RequireConfirmation,
    SetSlotDone,
    SetSlotEnabled,
    SetSlotValue,
    SlotRequest,
)
from parley.config.models import FillSettings
from parley.core.actions import (
    AcceptSlot,
    AddMessage,
    AddToRunOnFillStack,
    ConfirmSlot,
    DenySlot,
    DisableSlot,
    EnableSlot,
    FillSlot,
    MarkSlotDone,
    SlotRef,
)
from parley.core.constants import OutputMessageType
from parley.core.errors import ConfigError, SlotNotFoundError
from parley.core.reducers import apply_action
from parley.core.selectors import get_requesting_slot_id
from parley.core.slot_utils import has_slot_value
from parley.core.types import ConversationState
from parley.pipeline.callbacks import build_context, run_on_fill, run_retry, run_validate

logger = logging.getLogger(__name__)


class SlotFiller:
    """Runs slot callbacks and applies their outcome to the snapshot."""

    def __init__(
        self,
        abilities: AbilityRegistry,
        settings: FillSettings | None = None,
        conversation: Any = None,
    ) -> None:
        self.abilities = abilities
        self.settings = settings or FillSettings()
        self.conversation = conversation

    async def validate_and_fill(
        self, state: ConversationState, ability_name: str, slot: Slot, value: Any
    ) -> tuple[ConversationState, bool]:
        """Validate ``value`` and fill the slot when accepted.

        A rejection reason is queued as a validate_reason message.

        Returns:
            The new snapshot and whether the slot was filled.
        """
        ctx = build_context(state, self.conversation, ability_name, slot.name)
        result = await run_validate(slot, value, ctx)
        if not result.is_valid:
            logger.debug(f"{ability_name}.{slot.name} rejected {value!r}")
            if result.reason:
                state = apply_action(
                    state,
                    AddMessage(
                        message=result.reason,
                        message_type=OutputMessageType.validate_reason,
                        ability_name=ability_name,
                        slot_name=slot.name,
                    ),
                )
            return state, False
        return await self.fill(state, ability_name, slot, value), True

    async def fill(
        self,
        state: ConversationState,
        ability_name: str,
        slot: Slot,
        value: Any,
        depth: int = 0,
    ) -> ConversationState:
        """Fill a slot without validation, running its on_fill hook."""
        ctx = build_context(state, self.conversation, ability_name, slot.name)
        outcome = await run_on_fill(slot, value, ctx)

        state = apply_action(
            state, FillSlot(ability_name=ability_name, slot_name=slot.name, value=value)
        )
        for request in outcome.requests:
            state = await self.apply_request(state, ability_name, slot.name, request, depth)

        if outcome.message:
            state = apply_action(
                state,
                AddMessage(
                    message=outcome.message,
                    message_type=OutputMessageType.slot_fill,
                    ability_name=ability_name,
                    slot_name=slot.name,
                ),
            )
            if self.settings.store_fill_message and has_slot_value(
                state["slot_data"], ability_name, slot.name
            ):
                state = apply_action(
                    state,
                    FillSlot(ability_name=ability_name, slot_name=slot.name, value=outcome.message),
                )
        return state

    async def apply_request(
        self,
        state: ConversationState,
        ability_name: str,
        slot_name: str,
        request: SlotRequest,
        depth: int = 0,
    ) -> ConversationState:
        """Apply one request returned by the on_fill hook of ``ability_name.slot_name``.

        Raises:
            SlotNotFoundError: When a request asks to run on_fill of a slot that
                does not exist.
            ConfigError: When on_fill chains nest deeper than allowed.
        """
        current = SlotRef(ability_name=ability_name, slot_name=slot_name)

        if isinstance(request, SetSlotValue):
            target = self.abilities.get_slot(request.ability_name, request.slot_name)
            if request.run_on_fill:
                if target is None:
                    raise SlotNotFoundError(request.ability_name, request.slot_name)
                if depth + 1 > self.settings.max_chain_depth:
                    raise ConfigError(
                        f"on_fill chain deeper than {self.settings.max_chain_depth} "
                        f"at {request.ability_name}.{request.slot_name}"
                    )
                return await self.fill(state, request.ability_name, target, request.value, depth + 1)
            if target is None:
                return self._dropped(state, request)
            return apply_action(
                state,
                FillSlot(
                    ability_name=request.ability_name,
                    slot_name=request.slot_name,
                    value=request.value,
                ),
            )

        if isinstance(request, SetSlotEnabled):
            if self.abilities.get_slot(request.ability_name, request.slot_name) is None:
                return self._dropped(state, request)
            action_cls = EnableSlot if request.is_enabled else DisableSlot
            return apply_action(
                state, action_cls(ability_name=request.ability_name, slot_name=request.slot_name)
            )

        if isinstance(request, SetSlotDone):
            if self.abilities.get_slot(request.ability_name, request.slot_name) is None:
                return self._dropped(state, request)
            return apply_action(
                state,
                MarkSlotDone(
                    ability_name=request.ability_name,
                    slot_name=request.slot_name,
                    is_done=request.is_done,
                ),
            )

        if isinstance(request, FulfillSlot):
            # Unknown targets are dropped when the stack is drained
            return apply_action(
                state,
                AddToRunOnFillStack(
                    ability_name=request.ability_name,
                    slot_name=request.slot_name,
                    value=request.value,
                ),
            )

        if isinstance(request, RequireConfirmation):
            if self.abilities.get_slot(ability_name, request.slot_name) is None:
                return self._dropped(state, request)
            target_ref = SlotRef(ability_name=ability_name, slot_name=request.slot_name)
            return apply_action(state, ConfirmSlot(origin=current, target=target_ref))

        if isinstance(request, (AcceptConfirmation, DenyConfirmation)):
            origin = get_requesting_slot_id(state, ability_name, slot_name)
            if origin is None:
                return self._dropped(state, request)
            origin_ref = SlotRef(**origin)
            if isinstance(request, AcceptConfirmation):
                return apply_action(state, AcceptSlot(origin=origin_ref))
            return apply_action(state, DenySlot(origin=origin_ref, confirming=current))

        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    async def retry_message(
        self,
        state: ConversationState,
        ability_name: str,
        slot: Slot,
        value: Any,
        turn_count: int,
    ) -> ConversationState:
        """Queue the slot's retry text, if it produces any."""
        ctx = build_context(state, self.conversation, ability_name, slot.name)
        text = await run_retry(slot, value, ctx, turn_count)
        if not text:
            return state
        return apply_action(
            state,
            AddMessage(
                message=text,
                message_type=OutputMessageType.retry,
                ability_name=ability_name,
                slot_name=slot.name,
            ),
        )

    @staticmethod
    def _dropped(state: ConversationState, request: SlotRequest) -> ConversationState:
        logger.debug(f"Dropping {request.type} request for unknown target", extra={"request": request.model_dump()})
        return state
