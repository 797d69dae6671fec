"""Outtake stage: hand the queued messages to the host."""

from parley.core.actions import DrainMessages
from parley.core.reducers import apply_action
from parley.core.types import ConversationState, OutputMessage


def outtake(state: ConversationState) -> tuple[list[OutputMessage], ConversationState]:
    """Return the queued messages in order and a snapshot with an empty queue.

    Running it again on the returned snapshot yields no messages.
    """
    messages = list(state["output_message_queue"])
    return messages, apply_action(state, DrainMessages())
