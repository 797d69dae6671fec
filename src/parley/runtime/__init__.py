from parley.runtime.engine import DialogueEngine
from parley.runtime.store import ConversationStore, InMemoryConversationStore

__all__ = ["ConversationStore", "DialogueEngine", "InMemoryConversationStore"]
