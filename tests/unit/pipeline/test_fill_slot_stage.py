"""Tests for the fill stage."""

import pytest

from parley.abilities.models import Ability
from parley.abilities.registry import AbilityRegistry
from parley.core.actions import FillSlot, MarkPrompted, PushPrompt, SetFocusedAbility, SetMessageData
from parley.core.constants import OutputMessageType
from parley.core.reducers import apply_action, apply_actions
from parley.core.state import create_empty_state
from parley.pipeline.fill_slot import candidate_value, fill_slot
from tests.factories import make_slot, message, non_empty


def with_message(state, msg):
    return apply_action(state, SetMessageData(**msg))


def prompted(state, ability_name, slot_name):
    return apply_actions(
        state,
        [
            PushPrompt(ability_name=ability_name, slot_name=slot_name),
            MarkPrompted(ability_name=ability_name, slot_name=slot_name),
        ],
    )


def texts(state):
    return [(m["type"], m["message"]) for m in state["output_message_queue"]]


class TestCandidateValue:
    def test_prefers_same_named_entity(self):
        entry = {"ability_name": "a", "slot_name": "origin"}
        assert candidate_value(entry, message("from NYC", origin="NYC")) == "NYC"
        assert candidate_value(entry, message("from NYC", destination="LAX")) == "from NYC"


class TestActivePrompt:
    @pytest.mark.asyncio
    async def test_valid_answer_fills_and_pops(self, registry):
        state = prompted(create_empty_state(), "book_flight", "origin")
        state = with_message(state, message("NYC"))

        state = await fill_slot(state, registry)

        assert state["slot_data"] == {"book_flight": {"origin": "NYC"}}
        assert state["prompted_slot_stack"] == []
        assert state["output_message_queue"] == []

    @pytest.mark.asyncio
    async def test_valid_answer_stops_matching(self, registry):
        state = prompted(create_empty_state(), "book_flight", "origin")
        state = with_message(state, message("NYC", destination="LAX"))

        state = await fill_slot(state, registry)

        assert state["slot_data"] == {"book_flight": {"origin": "NYC"}}

    @pytest.mark.asyncio
    async def test_invalid_answer_retries_same_prompt(self, registry):
        state = prompted(create_empty_state(), "book_flight", "origin")
        state = with_message(state, message("   "))

        state = await fill_slot(state, registry)

        assert texts(state) == [
            (OutputMessageType.validate_reason, "Please give me a value."),
            (OutputMessageType.retry, "Retry origin #1"),
        ]
        entry = state["prompted_slot_stack"][-1]
        assert entry["slot_name"] == "origin"
        assert entry["turn_count"] == 1
        assert entry["prompted"] is True

    @pytest.mark.asyncio
    async def test_invalid_answer_falls_through_to_entities(self, registry):
        state = apply_action(create_empty_state(), SetFocusedAbility(ability_name="book_flight"))
        state = prompted(state, "book_flight", "origin")
        state = with_message(state, message("", destination="LAX"))

        state = await fill_slot(state, registry)

        assert state["slot_data"] == {"book_flight": {"destination": "LAX"}}
        # Active prompt still unanswered, so it is retried
        assert state["prompted_slot_stack"][-1]["slot_name"] == "origin"
        assert texts(state)[-1] == (OutputMessageType.retry, "Retry origin #1")

    @pytest.mark.asyncio
    async def test_stale_prompt_is_dropped(self, registry):
        state = prompted(create_empty_state(), "cancel_flight", "booking_id")
        state = with_message(state, message("ABC"))

        state = await fill_slot(state, registry)

        assert state["prompted_slot_stack"] == []
        assert state["output_message_queue"] == []


class TestOpportunisticMatching:
    @pytest.mark.asyncio
    async def test_intent_focuses_ability_and_fills_entities(self, registry):
        state = with_message(
            create_empty_state(), message("NYC to LAX", "book_flight", origin="NYC", destination="LAX")
        )

        state = await fill_slot(state, registry)

        assert state["focused_ability"] == "book_flight"
        assert state["slot_data"] == {"book_flight": {"origin": "NYC", "destination": "LAX"}}
        assert state["filled_slots_on_current_turn"] == [
            {"ability_name": "book_flight", "slot_name": "origin"},
            {"ability_name": "book_flight", "slot_name": "destination"},
        ]

    @pytest.mark.asyncio
    async def test_no_entities_and_no_prompt_does_nothing(self, registry):
        state = with_message(create_empty_state(), message("hello"))
        state = await fill_slot(state, registry)
        assert state["slot_data"] == {}
        assert state["output_message_queue"] == []

    @pytest.mark.asyncio
    async def test_invalid_match_becomes_active_prompt(self, registry):
        state = apply_action(create_empty_state(), SetFocusedAbility(ability_name="book_flight"))
        state = with_message(state, message("", origin="  "))

        state = await fill_slot(state, registry)

        assert texts(state) == [
            (OutputMessageType.validate_reason, "Please give me a value."),
            (OutputMessageType.retry, "Retry origin #1"),
        ]
        entry = state["prompted_slot_stack"][-1]
        assert (entry["slot_name"], entry["prompted"], entry["turn_count"]) == ("origin", True, 1)

    @pytest.mark.asyncio
    async def test_first_invalid_match_is_retried(self, registry):
        state = apply_action(create_empty_state(), SetFocusedAbility(ability_name="book_flight"))
        state = with_message(state, message("", origin=" ", destination=" "))

        state = await fill_slot(state, registry)

        assert state["prompted_slot_stack"][-1]["slot_name"] == "origin"
        assert texts(state)[-1] == (OutputMessageType.retry, "Retry origin #1")

    @pytest.mark.asyncio
    async def test_intent_ability_matched_when_focused_has_no_match(self):
        pay = Ability(name="pay", slots=[make_slot("amount", validate=non_empty)])
        book = Ability(name="book_flight", slots=[make_slot("origin")])
        registry = AbilityRegistry([pay, book])
        state = apply_action(create_empty_state(), SetFocusedAbility(ability_name="book_flight"))
        state = with_message(state, message("", "pay", amount="10"))

        state = await fill_slot(state, registry)

        assert state["slot_data"] == {"pay": {"amount": "10"}}
        assert state["focused_ability"] == "pay"

    @pytest.mark.asyncio
    async def test_focused_slotless_ability_completes_on_entities(self, registry):
        state = apply_action(create_empty_state(), SetFocusedAbility(ability_name="greet"))
        state = with_message(state, message("hi", name="Ana"))

        state = await fill_slot(state, registry)

        assert state["abilities_complete_on_current_turn"] == ["greet"]

    @pytest.mark.asyncio
    async def test_slotless_intent_completes_without_entities(self, registry):
        state = with_message(create_empty_state(), message("hello", "greet"))

        state = await fill_slot(state, registry)

        assert state["abilities_complete_on_current_turn"] == ["greet"]
        assert state["focused_ability"] is None

    @pytest.mark.asyncio
    async def test_slot_attempted_once_per_scan(self):
        calls = []

        def validate(value, ctx):
            calls.append(value)
            return False

        book = Ability(name="book_flight", slots=[make_slot("origin", validate=validate)])
        state = apply_action(create_empty_state(), SetFocusedAbility(ability_name="book_flight"))
        state = with_message(
            state,
            {
                "raw_text": "",
                "intent": None,
                "entities": [{"name": "origin", "value": "A"}, {"name": "origin", "value": "B"}],
            },
        )

        await fill_slot(state, AbilityRegistry([book]))

        assert calls == ["A"]

    @pytest.mark.asyncio
    async def test_active_prompt_answered_by_other_slot_is_popped(self):
        from parley.abilities.requests import SetSlotValue

        book = Ability(
            name="book_flight",
            slots=[
                make_slot("origin", validate=lambda v, ctx: False),
                make_slot(
                    "route",
                    on_fill=lambda v, ctx: SetSlotValue(
                        ability_name="book_flight", slot_name="origin", value=v.split("-")[0]
                    ),
                ),
            ],
        )
        state = apply_action(create_empty_state(), SetFocusedAbility(ability_name="book_flight"))
        state = prompted(state, "book_flight", "origin")
        state = with_message(state, message("", route="NYC-LAX"))

        state = await fill_slot(state, AbilityRegistry([book]))

        assert state["slot_data"]["book_flight"]["origin"] == "NYC"
        assert state["prompted_slot_stack"] == []
        assert state["output_message_queue"] == []

    @pytest.mark.asyncio
    async def test_callbacks_see_earlier_fills(self, registry):
        seen = []
        book = Ability(
            name="book_flight",
            slots=[
                make_slot("origin"),
                make_slot(
                    "destination",
                    validate=lambda v, ctx: seen.append(ctx.get_slot_value("origin")) or True,
                ),
            ],
        )
        state = apply_action(create_empty_state(), SetFocusedAbility(ability_name="book_flight"))
        state = with_message(state, message("", origin="NYC", destination="LAX"))

        await fill_slot(state, AbilityRegistry([book]))

        assert seen == ["NYC"]


@pytest.mark.asyncio
async def test_fill_does_not_touch_unrelated_state(registry):
    state = apply_action(create_empty_state(), FillSlot(ability_name="greet", slot_name="x", value=1))
    state = with_message(state, message("hi"))
    result = await fill_slot(state, registry)
    assert result["slot_data"] == {"greet": {"x": 1}}
