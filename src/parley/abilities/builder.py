"""Build abilities from declarative YAML configuration.

Slots declared in YAML get generated callbacks:

- ``prompt`` / ``retry_prompt`` / ``fill_message`` are templates formatted
  with the ability's stored slot values plus ``{value}`` and ``{turn_count}``.
- ``validator`` names a check from ``ValidatorRegistry``.
- ``confirm_with`` makes the slot ask for confirmation through another slot
  of the same ability. That slot accepts yes/no answers and accepts or denies
  the original value.
"""

import logging
from collections.abc import Callable
from typing import Any

from parley.abilities.models import (
    Ability,
    CompletionResult,
    OnFillResult,
    Slot,
    SlotContext,
    ValidateResult,
)
from parley.abilities.requests import (
    AcceptConfirmation,
    DenyConfirmation,
    RequireConfirmation,
    SlotRequest,
)
from parley.config.models import AbilityConfig, ParleyConfig, SlotConfig
from parley.core.errors import ConfigError
from parley.validation import ValidatorRegistry
from parley.validation.validators import YES_WORDS, normalize_answer

logger = logging.getLogger(__name__)

CONFIRMATION_VALIDATOR = "yes_no"


class _TemplateValues(dict):
    """Leave unknown placeholders untouched instead of failing."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render(template: str, ctx: SlotContext, **extra: Any) -> str:
    """Format a template with the ability's slot values and extra fields."""
    values = _TemplateValues(ctx.slots)
    values.update(extra)
    return template.format_map(values)


def _make_query(config: SlotConfig) -> Callable[[SlotContext], str]:
    def query(ctx: SlotContext) -> str:
        return render(config.prompt, ctx)

    return query


def _make_validate(config: SlotConfig, validator: str | None) -> Callable[[Any, SlotContext], ValidateResult]:
    def validate(value: Any, ctx: SlotContext) -> ValidateResult:
        if validator is None or ValidatorRegistry.validate(validator, value):
            return ValidateResult.valid()
        reason = config.validation_error_message or ValidatorRegistry.default_message(validator)
        if reason is not None:
            reason = render(reason, ctx, value=value)
        return ValidateResult.invalid(reason)

    return validate


def _make_retry(config: SlotConfig) -> Callable[[Any, SlotContext, int], str]:
    template = config.retry_prompt or config.prompt

    def retry(value: Any, ctx: SlotContext, turn_count: int) -> str:
        return render(template, ctx, value=value, turn_count=turn_count)

    return retry


def _make_on_fill(config: SlotConfig, confirms: str | None) -> Callable[[Any, SlotContext], OnFillResult]:
    def on_fill(value: Any, ctx: SlotContext) -> OnFillResult:
        requests: list[SlotRequest] = []
        if confirms is not None:
            if normalize_answer(value) in YES_WORDS:
                requests.append(AcceptConfirmation())
            else:
                requests.append(DenyConfirmation())
        if config.confirm_with is not None:
            requests.append(RequireConfirmation(slot_name=config.confirm_with))
        message = render(config.fill_message, ctx, value=value) if config.fill_message else None
        return OnFillResult(message=message, requests=requests)

    return on_fill


def build_slot(config: SlotConfig, confirms: str | None = None) -> Slot:
    """Build one slot.

    Args:
        config: Declarative slot definition
        confirms: Name of the slot this one confirms, if any
    """
    validator = config.validator
    if validator is None and confirms is not None:
        validator = CONFIRMATION_VALIDATOR
    if validator is not None and not ValidatorRegistry.is_registered(validator):
        raise ConfigError(
            f"Slot '{config.name}' uses unknown validator '{validator}'. "
            f"Available: {', '.join(ValidatorRegistry.list_validators())}"
        )

    return Slot(
        name=config.name,
        query=_make_query(config),
        validate=_make_validate(config, validator),
        retry=_make_retry(config),
        on_fill=_make_on_fill(config, confirms),
        order=config.order,
        default_is_enabled=config.enabled,
        description=config.description,
    )


def build_ability(name: str, config: AbilityConfig) -> Ability:
    """Build one ability and its slots."""
    confirmed_by = {s.confirm_with: s.name for s in config.slots if s.confirm_with}
    slots = [build_slot(s, confirms=confirmed_by.get(s.name)) for s in config.slots]

    on_complete = None
    if config.complete_message is not None or config.next_ability is not None:
        complete_message = config.complete_message
        next_ability = config.next_ability

        def on_complete(ctx: SlotContext) -> CompletionResult:
            messages = [render(complete_message, ctx)] if complete_message else []
            return CompletionResult(messages=messages, next_ability=next_ability)

    return Ability(
        name=name,
        slots=slots,
        on_complete=on_complete,
        description=config.description,
    )


def build_abilities(config: ParleyConfig) -> list[Ability]:
    """Build every ability declared in ``config``.

    Raises:
        ConfigError: If a slot names an unknown validator or an ability
            hands over to an unknown ability.
    """
    for name, ability_config in config.abilities.items():
        nxt = ability_config.next_ability
        if nxt is not None and nxt not in config.abilities:
            raise ConfigError(f"Ability '{name}' hands over to unknown ability '{nxt}'")

    abilities = [build_ability(name, cfg) for name, cfg in config.abilities.items()]
    logger.debug(f"Built {len(abilities)} abilities from config")
    return abilities
