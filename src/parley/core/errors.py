"""Engine errors."""


class ParleyError(Exception):
    """Base class for all parley errors."""

    pass


class ConfigError(ParleyError):
    """Raised when abilities or settings are invalid."""


class SlotNotFoundError(ConfigError):
    """Raised when a callback asks to run on_fill for a slot that does not exist.

    This is a programming error in the integrator's callback and aborts the turn.
    """

    def __init__(self, ability_name: str, slot_name: str):
        self.ability_name = ability_name
        self.slot_name = slot_name
        super().__init__(f"There is no slot '{slot_name}' in ability '{ability_name}'")


class StateError(ParleyError):
    """Raised when a conversation snapshot is malformed."""

    pass


class CallbackError(ParleyError):
    """Raised when a slot or ability callback fails."""

    def __init__(
        self,
        callback: str,
        ability_name: str,
        slot_name: str | None = None,
        cause: BaseException | None = None,
    ):
        self.callback = callback
        self.ability_name = ability_name
        self.slot_name = slot_name
        target = f"{ability_name}.{slot_name}" if slot_name else ability_name
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{callback}() failed for {target}{detail}")
