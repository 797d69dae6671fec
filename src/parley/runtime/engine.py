"""DialogueEngine: runs one turn of the pipeline per user message."""

from collections.abc import Callable, Iterable
from copy import deepcopy
from pathlib import Path
from typing import Any

from parley.abilities.builder import build_abilities
from parley.abilities.models import Ability
from parley.abilities.registry import AbilityRegistry
from parley.abilities.requests import ProviderRequest
from parley.config.loader import ConfigLoader
from parley.config.models import ParleyConfig, Settings
from parley.core.nlu import NLUResult
from parley.core.state import create_empty_state, restore_state
from parley.core.types import ConversationState, OutputMessage
from parley.observability.logging import ContextLogger
from parley.pipeline.callbacks import maybe_await
from parley.pipeline.context import PipelineContext
from parley.pipeline.graph import build_pipeline
from parley.pipeline.outtake import outtake
from parley.runtime.store import ConversationStore, InMemoryConversationStore

logger = ContextLogger(__name__)

SlotDataProvider = Callable[[Any], Any]


class DialogueEngine:
    """Turn runner used by hosts.

    Each call to ``process_turn`` loads the conversation snapshot, runs
    intake, fill, evaluate and execute, drains the message queue and commits
    the new snapshot. The snapshot is only saved when the whole turn
    succeeded, so a failing callback leaves the conversation as it was.

    Usage:
        engine = DialogueEngine([book_flight], config=settings)
        messages = await engine.process_turn("user-1", {"raw_text": "hi", "intent": "book_flight"})
    """

    def __init__(
        self,
        abilities: AbilityRegistry | Iterable[Ability],
        config: ParleyConfig | Settings | None = None,
        store: ConversationStore | None = None,
        slot_data_provider: SlotDataProvider | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            abilities: Abilities the engine can pursue
            config: Root config or bare settings (defaults used when omitted)
            store: Snapshot store (in-memory when omitted)
            slot_data_provider: Called with the host's conversation object at
                the start of each turn; returns (or resolves to) an iterable of
                IncomingSlotData / SlotRequest items applied during intake
        """
        self.abilities = AbilityRegistry.coerce(abilities)
        if isinstance(config, ParleyConfig):
            config = config.settings
        self.settings = config or Settings()
        self.store: ConversationStore = store or InMemoryConversationStore()
        self.slot_data_provider = slot_data_provider
        self._graph = build_pipeline()

    @classmethod
    def from_config(
        cls,
        config: ParleyConfig | Path | str,
        store: ConversationStore | None = None,
        slot_data_provider: SlotDataProvider | None = None,
    ) -> "DialogueEngine":
        """Create an engine whose abilities are declared in YAML."""
        if not isinstance(config, ParleyConfig):
            config = ConfigLoader.load(config)
        return cls(
            build_abilities(config),
            config=config,
            store=store,
            slot_data_provider=slot_data_provider,
        )

    async def process_turn(
        self,
        conversation_id: str,
        nlu_result: NLUResult | dict[str, Any] | str | None,
        conversation: Any = None,
    ) -> list[OutputMessage]:
        """
        Process one user message.

        Args:
            conversation_id: Key of the conversation snapshot in the store
            nlu_result: NLU output for this message (model, dict or raw text)
            conversation: Host object handed to callbacks untouched

        Returns:
            Messages to send to the user, in order
        """
        log = logger.with_context(conversation_id=conversation_id)
        message = NLUResult.coerce(nlu_result).to_message_data()

        stored = await self.store.load(conversation_id)
        if stored is None:
            log.debug("Starting new conversation")
            state = create_empty_state(self.settings.default_ability)
        else:
            state = restore_state(deepcopy(dict(stored)))

        incoming = await self._collect_incoming(conversation)
        context = PipelineContext(
            abilities=self.abilities,
            settings=self.settings,
            message=message,
            incoming=incoming,
            conversation=conversation,
        )

        result = await self._graph.ainvoke(state, context=context)
        messages, new_state = outtake(restore_state(dict(result)))

        await self.store.save(conversation_id, new_state)
        log.debug(
            f"Turn processed with {len(messages)} message(s)",
            extra={"focused_ability": new_state["focused_ability"]},
        )
        return messages

    async def get_state(self, conversation_id: str) -> ConversationState | None:
        """Return a copy of the stored snapshot for inspection."""
        stored = await self.store.load(conversation_id)
        if stored is None:
            return None
        return restore_state(deepcopy(dict(stored)))

    async def _collect_incoming(self, conversation: Any) -> tuple[ProviderRequest, ...]:
        if self.slot_data_provider is None:
            return ()
        items = await maybe_await(self.slot_data_provider(conversation))
        return tuple(items or ())
