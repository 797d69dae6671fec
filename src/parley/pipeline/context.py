from dataclasses import dataclass, field
from typing import Any

from parley.abilities.registry import AbilityRegistry
from parley.abilities.requests import ProviderRequest
from parley.config.models import Settings
from parley.core.types import MessageData


@dataclass(frozen=True)
class PipelineContext:
    """Per-turn context passed to pipeline nodes via runtime.context.

    Everything here is read-only for the stages; all changes go through the
    snapshot.
    """

    abilities: AbilityRegistry
    settings: Settings = field(default_factory=Settings)
    message: MessageData | None = None
    incoming: tuple[ProviderRequest, ...] = ()
    conversation: Any = None
