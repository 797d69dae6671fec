"""NLU result models delivered by the host once per user message."""

from typing import Any

from pydantic import BaseModel, Field

from parley.core.types import MessageData


class NLUEntity(BaseModel):
    """Structured value recognized in the user's text."""

    name: str
    value: Any = None


class NLUResult(BaseModel):
    """Output of the host's NLU provider for one turn."""

    raw_text: str = Field(default="", description="Text as typed or transcribed")
    intent: str | None = Field(default=None, description="Recognized intent (ability name)")
    entities: list[NLUEntity] = Field(default_factory=list, description="Entities in text order")

    @classmethod
    def coerce(cls, value: "NLUResult | dict[str, Any] | str | None") -> "NLUResult":
        """Accept a model, a plain dict, bare text or nothing."""
        if isinstance(value, NLUResult):
            return value
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(raw_text=value)
        return cls.model_validate(value)

    def to_message_data(self) -> MessageData:
        return {
            "raw_text": self.raw_text,
            "intent": self.intent,
            "entities": [{"name": e.name, "value": e.value} for e in self.entities],
        }
