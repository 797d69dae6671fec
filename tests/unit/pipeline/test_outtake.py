"""Tests for the outtake stage."""

from parley.core.actions import AddMessage
from parley.core.constants import OutputMessageType
from parley.core.reducers import apply_actions
from parley.pipeline.outtake import outtake


def test_returns_messages_in_order_and_empties_queue(empty_state):
    state = apply_actions(
        empty_state,
        [
            AddMessage(message="Not a city.", message_type=OutputMessageType.validate_reason),
            AddMessage(message="Where from?", message_type=OutputMessageType.retry),
        ],
    )

    messages, drained = outtake(state)

    assert [m["message"] for m in messages] == ["Not a city.", "Where from?"]
    assert drained["output_message_queue"] == []
    # Input snapshot is untouched
    assert len(state["output_message_queue"]) == 2


def test_second_outtake_yields_nothing(empty_state):
    state = apply_actions(
        empty_state, [AddMessage(message="Hi", message_type=OutputMessageType.ability_complete)]
    )
    _, drained = outtake(state)

    messages, again = outtake(drained)

    assert messages == []
    assert again == drained
