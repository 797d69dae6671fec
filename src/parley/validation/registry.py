"""Thread-safe registry of named validators for declarative slots."""

import logging
from collections.abc import Callable
from threading import Lock
from typing import Any

from parley.core.errors import ConfigError

logger = logging.getLogger(__name__)

ValueCheck = Callable[[Any], bool]

# Global state guarded by a lock
_validators: dict[str, ValueCheck] = {}
_messages: dict[str, str] = {}
_validators_lock = Lock()


class ValidatorRegistry:
    """
    Registry of value checks that YAML slot definitions refer to by name.

    A check receives the candidate value and returns True when it is
    acceptable. A default rejection message can be registered alongside it;
    a slot's ``validation_error_message`` takes precedence.
    """

    @classmethod
    def register(cls, name: str, message: str | None = None) -> Callable[[ValueCheck], ValueCheck]:
        """
        Register a value check.

        Usage:
            @ValidatorRegistry.register("iata_code", "Please use a 3-letter airport code.")
            def validate_iata(value: str) -> bool:
                return bool(re.match(r"^[A-Z]{3}$", value))

        Args:
            name: Name used in configuration files
            message: Default message shown when the check fails

        Returns:
            Decorator function
        """

        def decorator(func: ValueCheck) -> ValueCheck:
            with _validators_lock:
                if name in _validators:
                    logger.warning(
                        f"Validator '{name}' already registered, overwriting",
                        extra={"validator_name": name},
                    )
                _validators[name] = func
                if message is not None:
                    _messages[name] = message
                else:
                    _messages.pop(name, None)
            return func

        return decorator

    @classmethod
    def get(cls, name: str) -> ValueCheck:
        """
        Get a check by name.

        Raises:
            ConfigError: If the name is not registered
        """
        with _validators_lock:
            if name not in _validators:
                raise ConfigError(
                    f"Validator '{name}' not registered. Available: {sorted(_validators)}"
                )
            return _validators[name]

    @classmethod
    def default_message(cls, name: str) -> str | None:
        """Default rejection message of a check, if any."""
        with _validators_lock:
            return _messages.get(name)

    @classmethod
    def validate(cls, name: str, value: Any) -> bool:
        """Run a named check. Checks that raise count as a rejection."""
        check = cls.get(name)
        try:
            return bool(check(value))
        except (TypeError, ValueError, AttributeError):
            logger.debug(f"Validator '{name}' rejected {value!r} by raising")
            return False

    @classmethod
    def list_validators(cls) -> list[str]:
        with _validators_lock:
            return sorted(_validators)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        with _validators_lock:
            return name in _validators

    @classmethod
    def unregister(cls, name: str) -> None:
        """Remove a check. Primarily for tests."""
        with _validators_lock:
            _validators.pop(name, None)
            _messages.pop(name, None)
