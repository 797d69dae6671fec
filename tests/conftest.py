"""Shared fixtures for parley tests.

Abilities are built from plain functions so every test controls exactly what
the callbacks return.
"""

import logging
from pathlib import Path

import pytest

from parley.abilities.models import Ability
from parley.abilities.registry import AbilityRegistry
from parley.config.models import Settings
from parley.core.state import create_empty_state
from parley.core.types import ConversationState
from parley.observability.logging import LOGGER_NAME
from parley.runtime.engine import DialogueEngine
from tests.factories import make_slot, non_empty

EXAMPLE_CONFIG_DIR = Path(__file__).parent.parent / "examples" / "flight_booking"


@pytest.fixture
def book_flight() -> Ability:
    """book_flight with origin (order 1) and destination (order 2), both non-empty."""
    return Ability(
        name="book_flight",
        slots=[
            make_slot(
                "origin",
                order=1,
                validate=non_empty,
                retry=lambda value, ctx, n: f"Retry origin #{n}",
            ),
            make_slot(
                "destination",
                order=2,
                validate=non_empty,
                retry=lambda value, ctx, n: f"Retry destination #{n}",
            ),
        ],
        on_complete=lambda ctx: (
            f"Flying {ctx.get_slot_value('origin')} to {ctx.get_slot_value('destination')}"
        ),
    )


@pytest.fixture
def greet() -> Ability:
    return Ability(name="greet", slots=[], on_complete=lambda ctx: "Hello!")


@pytest.fixture
def registry(book_flight: Ability, greet: Ability) -> AbilityRegistry:
    return AbilityRegistry([book_flight, greet])


@pytest.fixture
def empty_state() -> ConversationState:
    return create_empty_state()


@pytest.fixture
def engine(registry: AbilityRegistry) -> DialogueEngine:
    return DialogueEngine(registry, config=Settings(default_ability="book_flight"))


@pytest.fixture
def example_config_dir() -> Path:
    return EXAMPLE_CONFIG_DIR


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handlers installed by setup_logging so they do not leak across tests."""
    logger, root = logging.getLogger(LOGGER_NAME), logging.getLogger()
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    root_handlers, root_level = list(root.handlers), root.level
    yield
    for handler in set(logger.handlers + root.handlers):
        if handler not in handlers and handler not in root_handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
    root.handlers = root_handlers
    root.setLevel(root_level)
