"""Conversation snapshot storage."""

import asyncio
import logging
from copy import deepcopy
from typing import Any, Protocol, runtime_checkable

from parley.core.types import ConversationState

logger = logging.getLogger(__name__)


@runtime_checkable
class ConversationStore(Protocol):
    """Where the engine loads and commits conversation snapshots.

    The engine only calls ``save`` after a turn completed without error.
    """

    async def load(self, conversation_id: str) -> ConversationState | dict[str, Any] | None:
        """Return the stored snapshot, or None for a new conversation."""
        ...

    async def save(self, conversation_id: str, state: ConversationState) -> None:
        """Persist the snapshot for ``conversation_id``."""
        ...


class InMemoryConversationStore:
    """Process-local store keeping deep copies of every snapshot.

    Useful for tests and the CLI; nothing survives a restart.
    """

    def __init__(self) -> None:
        self._states: dict[str, ConversationState] = {}
        self._lock = asyncio.Lock()

    async def load(self, conversation_id: str) -> ConversationState | None:
        async with self._lock:
            state = self._states.get(conversation_id)
            return deepcopy(state) if state is not None else None

    async def save(self, conversation_id: str, state: ConversationState) -> None:
        async with self._lock:
            self._states[conversation_id] = deepcopy(state)
        logger.debug(f"Saved state for conversation {conversation_id}")

    async def delete(self, conversation_id: str) -> None:
        async with self._lock:
            self._states.pop(conversation_id, None)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._states

    def __len__(self) -> int:
        return len(self._states)
