"""Tests for the CLI keyword NLU."""

from parley.cli.nlu import parse_input
from parley.core.nlu import NLUEntity


def test_plain_text():
    result = parse_input("New York please")
    assert result.raw_text == "New York please"
    assert result.intent is None
    assert result.entities == []


def test_intent_and_entities():
    result = parse_input('@book_flight origin=NYC destination="Los Angeles" soon')

    assert result.intent == "book_flight"
    assert result.entities == [
        NLUEntity(name="origin", value="NYC"),
        NLUEntity(name="destination", value="Los Angeles"),
    ]
    assert result.raw_text == "soon"


def test_lone_markers_are_text():
    assert parse_input("@ =x").raw_text == "@ =x"


def test_unbalanced_quotes_fall_back_to_split():
    result = parse_input('it\'s origin=NYC')
    assert result.raw_text == "it's"
    assert result.entities == [NLUEntity(name="origin", value="NYC")]


def test_empty_line():
    result = parse_input("")
    assert result.raw_text == ""
    assert result.entities == []
