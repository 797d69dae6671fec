"""Read-only registry of abilities supplied by the integrator."""

import logging
from collections.abc import Iterable, Iterator

from parley.abilities.models import Ability, Slot
from parley.core.errors import ConfigError

logger = logging.getLogger(__name__)


class AbilityRegistry:
    """Lookup table for abilities and their slots.

    The registry is built once at startup and never mutated by the engine.
    Unknown names resolve to None; callers decide whether that is a soft miss.

    Usage:
        registry = AbilityRegistry([book_flight, greet])
        slot = registry.get_slot("book_flight", "origin")
    """

    def __init__(self, abilities: Iterable[Ability]) -> None:
        self._abilities: dict[str, Ability] = {}
        for ability in abilities:
            if ability.name in self._abilities:
                raise ConfigError(f"Ability '{ability.name}' is defined more than once")
            seen: set[str] = set()
            for slot in ability.slots:
                if slot.name in seen:
                    raise ConfigError(
                        f"Slot '{slot.name}' is defined more than once in ability '{ability.name}'"
                    )
                seen.add(slot.name)
            self._abilities[ability.name] = ability
        logger.debug(
            f"Registered {len(self._abilities)} abilities",
            extra={"abilities": list(self._abilities)},
        )

    @classmethod
    def coerce(cls, abilities: "AbilityRegistry | Iterable[Ability]") -> "AbilityRegistry":
        """Return ``abilities`` as a registry, wrapping plain iterables."""
        if isinstance(abilities, AbilityRegistry):
            return abilities
        return cls(abilities)

    def get(self, ability_name: str | None) -> Ability | None:
        """Get ability by name."""
        if ability_name is None:
            return None
        return self._abilities.get(ability_name)

    def get_slot(self, ability_name: str | None, slot_name: str) -> Slot | None:
        """Get a slot of an ability by name."""
        ability = self.get(ability_name)
        if ability is None:
            return None
        return ability.get_slot(slot_name)

    def names(self) -> list[str]:
        return list(self._abilities)

    def __contains__(self, ability_name: object) -> bool:
        return ability_name in self._abilities

    def __iter__(self) -> Iterator[Ability]:
        return iter(self._abilities.values())

    def __len__(self) -> int:
        return len(self._abilities)
