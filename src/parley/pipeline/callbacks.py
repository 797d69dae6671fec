"""Invocation of user callbacks.

Callbacks may be sync or async; each one is awaited to completion before the
pipeline moves on. Results are normalized to the engine's types here, and
anything a callback raises is re-raised as ``CallbackError``.
"""

import inspect
from collections.abc import Mapping
from typing import Any

from parley.abilities.models import (
    Ability,
    CompletionResult,
    OnFillResult,
    Slot,
    SlotContext,
    ValidateResult,
)
from parley.abilities.requests import SlotRequest
from parley.core.errors import CallbackError, ParleyError
from parley.core.types import ConversationState


async def maybe_await(value: Any) -> Any:
    """Await ``value`` when the callback returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def build_context(
    state: ConversationState,
    conversation: Any,
    ability_name: str,
    slot_name: str | None = None,
) -> SlotContext:
    """Snapshot view for a callback, built fresh so it sees earlier mutations."""
    return SlotContext(
        conversation=conversation,
        message=state["message_data"],
        ability_name=ability_name,
        slot_name=slot_name,
        slot_data=state["slot_data"],
        slot_status=state["slot_status"],
    )


async def _call(name: str, ability_name: str, slot_name: str | None, func: Any, *args: Any) -> Any:
    try:
        return await maybe_await(func(*args))
    except ParleyError:
        raise
    except Exception as e:
        raise CallbackError(name, ability_name, slot_name, cause=e) from e


async def run_query(slot: Slot, ctx: SlotContext) -> str:
    result = await _call("query", ctx.ability_name, slot.name, slot.query, ctx)
    return str(result)


async def run_validate(slot: Slot, value: Any, ctx: SlotContext) -> ValidateResult:
    result = await _call("validate", ctx.ability_name, slot.name, slot.validate, value, ctx)
    return to_validate_result(result)


async def run_retry(slot: Slot, value: Any, ctx: SlotContext, turn_count: int) -> str | None:
    result = await _call("retry", ctx.ability_name, slot.name, slot.retry, value, ctx, turn_count)
    return None if result is None else str(result)


async def run_on_fill(slot: Slot, value: Any, ctx: SlotContext) -> OnFillResult:
    result = await _call("on_fill", ctx.ability_name, slot.name, slot.on_fill, value, ctx)
    return to_on_fill_result(result)


async def run_on_complete(ability: Ability, ctx: SlotContext) -> CompletionResult:
    if ability.on_complete is None:
        return CompletionResult()
    result = await _call("on_complete", ability.name, None, ability.on_complete, ctx)
    return to_completion_result(result)


def to_validate_result(result: Any) -> ValidateResult:
    """Normalize validator output (ValidateResult, bool or mapping)."""
    if isinstance(result, ValidateResult):
        return result
    if isinstance(result, Mapping):
        return ValidateResult(
            is_valid=bool(result.get("is_valid")),
            reason=result.get("reason"),
        )
    return ValidateResult(is_valid=bool(result))


def to_on_fill_result(result: Any) -> OnFillResult:
    """Normalize on_fill output (None, text, request(s) or OnFillResult)."""
    if result is None:
        return OnFillResult()
    if isinstance(result, OnFillResult):
        return result
    if isinstance(result, str):
        return OnFillResult(message=result or None)
    if isinstance(result, SlotRequest):
        return OnFillResult(requests=[result])
    if isinstance(result, (list, tuple)) and all(isinstance(r, SlotRequest) for r in result):
        return OnFillResult(requests=list(result))
    raise TypeError(f"on_fill returned unsupported value of type {type(result).__name__}")


def to_completion_result(result: Any) -> CompletionResult:
    """Normalize on_complete output (None, text, list of text or CompletionResult)."""
    if result is None:
        return CompletionResult()
    if isinstance(result, CompletionResult):
        return result
    if isinstance(result, str):
        return CompletionResult(messages=[result] if result else [])
    if isinstance(result, (list, tuple)):
        return CompletionResult(messages=[str(m) for m in result if m])
    raise TypeError(f"on_complete returned unsupported value of type {type(result).__name__}")
