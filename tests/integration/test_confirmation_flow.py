"""Confirmation flows declared in YAML."""

import pytest

from parley.config.loader import ConfigLoader
from parley.core.constants import OutputMessageType, PromptReason
from parley.runtime.engine import DialogueEngine

pytestmark = pytest.mark.integration

CONFIG = """
version: "1.0"
settings:
  default_ability: transfer
  fill:
    store_fill_message: false
abilities:
  transfer:
    slots:
      - name: amount
        prompt: "How much?"
        validator: positive_number
        confirm_with: confirm_amount
        fill_message: "Noted {value}."
        order: 1
      - name: confirm_amount
        prompt: "Send {amount}?"
        retry_prompt: "Yes or no: send {amount}?"
        order: 2
    complete_message: "Sent {amount}."
"""


@pytest.fixture
def transfer_engine(tmp_path) -> DialogueEngine:
    path = tmp_path / "parley.yaml"
    path.write_text(CONFIG)
    return DialogueEngine.from_config(ConfigLoader.load(path))


async def texts(engine, text):
    return [m["message"] for m in await engine.process_turn("c1", text)]


@pytest.mark.asyncio
async def test_accepting_completes(transfer_engine):
    assert await texts(transfer_engine, "") == ["How much?"]
    assert await texts(transfer_engine, "25") == ["Noted 25.", "Send 25?"]

    state = await transfer_engine.get_state("c1")
    entry = state["prompted_slot_stack"][-1]
    assert entry["reason"] == PromptReason.confirmation
    assert entry["origin"] == {"ability_name": "transfer", "slot_name": "amount"}

    assert await texts(transfer_engine, "Yes!") == ["Sent 25."]
    state = await transfer_engine.get_state("c1")
    assert state["slot_status"]["transfer"]["amount"]["is_done"] is True
    assert state["ability_status"] == ["transfer"]


@pytest.mark.asyncio
async def test_denying_asks_again(transfer_engine):
    await texts(transfer_engine, "")
    await texts(transfer_engine, "25")

    assert await texts(transfer_engine, "no") == ["How much?"]

    state = await transfer_engine.get_state("c1")
    assert state["slot_data"] == {}
    assert [e["slot_name"] for e in state["prompted_slot_stack"]] == ["amount"]

    await texts(transfer_engine, "30")
    assert await texts(transfer_engine, "yes") == ["Sent 30."]


@pytest.mark.asyncio
async def test_unclear_answer_retries_confirmation(transfer_engine):
    await texts(transfer_engine, "")
    await texts(transfer_engine, "25")

    messages = await transfer_engine.process_turn("c1", "maybe")

    assert [m["type"] for m in messages] == [OutputMessageType.validate_reason, OutputMessageType.retry]
    assert messages[-1]["message"] == "Yes or no: send 25?"
    state = await transfer_engine.get_state("c1")
    assert state["prompted_slot_stack"][-1]["slot_name"] == "confirm_amount"
