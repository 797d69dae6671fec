"""Ability and slot definitions.

An ``Ability`` is a named task built from ``Slot`` objects. Each slot carries
its callbacks; optional callbacks are replaced by defaults at construction
time, so the pipeline can always call them.

Every callback may be a plain function or a coroutine function.
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from parley.abilities.requests import SlotRequest
from parley.core.constants import DEFAULT_SLOT_ORDER
from parley.core.slot_utils import get_slot_status as _read_status
from parley.core.types import MessageData, SlotStatus


@dataclass(frozen=True)
class ValidateResult:
    """Outcome of a slot validator."""

    is_valid: bool
    reason: str | None = None

    @classmethod
    def valid(cls) -> "ValidateResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, reason: str | None = None) -> "ValidateResult":
        return cls(is_valid=False, reason=reason)


@dataclass
class OnFillResult:
    """What an on_fill hook wants: an optional message and follow-up requests."""

    message: str | None = None
    requests: list[SlotRequest] = field(default_factory=list)


@dataclass
class CompletionResult:
    """What an ability completion produced."""

    messages: list[str] = field(default_factory=list)
    next_ability: str | None = None


@dataclass(frozen=True)
class SlotContext:
    """Read-only view handed to every callback.

    Attributes:
        conversation: Host-owned conversation data, passed through untouched.
        message: This turn's NLU result.
        ability_name: Ability the callback belongs to.
        slot_name: Slot the callback belongs to (None for ability completion).
    """

    conversation: Any
    message: MessageData | None
    ability_name: str
    slot_name: str | None
    slot_data: Mapping[str, Mapping[str, Any]]
    slot_status: Mapping[str, Mapping[str, SlotStatus]]

    def get_slot_value(
        self, slot_name: str, ability_name: str | None = None, default: Any = None
    ) -> Any:
        """Get a stored slot value (defaults to this context's ability)."""
        return self.slot_data.get(ability_name or self.ability_name, {}).get(slot_name, default)

    def get_slot_status(self, slot_name: str, ability_name: str | None = None) -> SlotStatus:
        """Get the status flags of a slot (defaults to this context's ability)."""
        return _read_status(dict(self.slot_status), ability_name or self.ability_name, slot_name)  # type: ignore[arg-type]

    @property
    def slots(self) -> dict[str, Any]:
        """All stored values of this context's ability."""
        return dict(self.slot_data.get(self.ability_name, {}))


QueryFn = Callable[[SlotContext], Union[str, Awaitable[str]]]
ValidateFn = Callable[[Any, SlotContext], Union[ValidateResult, bool, Awaitable[ValidateResult | bool]]]
RetryFn = Callable[[Any, SlotContext, int], Union[str | None, Awaitable[str | None]]]
OnFillFn = Callable[[Any, SlotContext], Any]
CompleteFn = Callable[[SlotContext], Any]


def always_valid(value: Any, ctx: SlotContext) -> ValidateResult:
    """Default validator: accept anything."""
    return ValidateResult.valid()


def no_retry(value: Any, ctx: SlotContext, turn_count: int) -> None:
    """Default retry: say nothing."""
    return None


def no_on_fill(value: Any, ctx: SlotContext) -> None:
    """Default on_fill: do nothing."""
    return None


@dataclass
class Slot:
    """One piece of information to collect within an ability.

    Attributes:
        name: Unique within the ability; matched against entity names.
        query: Produces the prompt text.
        validate: Accepts or rejects a candidate value.
        retry: Produces a re-prompt after a rejected or missing answer.
        on_fill: Runs after a successful fill; may return text and requests.
        order: Prompt priority, lower is asked first.
        default_is_enabled: Enabled state used until a request changes it.
    """

    name: str
    query: QueryFn
    validate: ValidateFn | None = None
    retry: RetryFn | None = None
    on_fill: OnFillFn | None = None
    order: int = DEFAULT_SLOT_ORDER
    default_is_enabled: bool = True
    description: str = ""

    def __post_init__(self) -> None:
        if self.validate is None:
            self.validate = always_valid
        if self.retry is None:
            self.retry = no_retry
        if self.on_fill is None:
            self.on_fill = no_on_fill


@dataclass
class Ability:
    """A named task composed of slots and a completion action."""

    name: str
    slots: list[Slot] = field(default_factory=list)
    on_complete: CompleteFn | None = None
    description: str = ""

    def get_slot(self, slot_name: str) -> Slot | None:
        for slot in self.slots:
            if slot.name == slot_name:
                return slot
        return None
