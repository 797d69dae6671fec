"""Configuration models for parley."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from parley.core.constants import DEFAULT_SLOT_ORDER

# Config file version constants
SUPPORTED_VERSIONS = frozenset({"1.0"})
CURRENT_VERSION = "1.0"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class FillSettings(BaseModel):
    """Behaviour of the validate-and-fill protocol."""

    store_fill_message: bool = Field(
        default=True,
        description=(
            "When an on_fill hook returns text, store that text as the slot value "
            "instead of the submitted value"
        ),
    )
    max_chain_depth: int = Field(
        default=8,
        ge=1,
        description="Maximum nesting of set_slot_value(run_on_fill=True) chains",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="INFO", description="Log level for the parley logger")
    json_file: str | None = Field(
        default=None, description="Rotating JSON log file (disabled when unset)"
    )


class Settings(BaseModel):
    """Runtime settings for the engine."""

    default_ability: str | None = Field(
        default=None, description="Ability pursued when no intent or focus is present"
    )
    fill: FillSettings = Field(default_factory=FillSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class SlotConfig(BaseModel):
    """Declarative slot definition."""

    name: str = Field(description="Slot name, matched against entity names")
    prompt: str = Field(description="Prompt sent when the slot is queried")
    retry_prompt: str | None = Field(
        default=None,
        description="Re-prompt after an invalid answer; supports {value} and {turn_count}",
    )
    validator: str | None = Field(default=None, description="Registered validator name")
    validation_error_message: str | None = Field(
        default=None, description="Message shown when validation fails"
    )
    fill_message: str | None = Field(
        default=None, description="Message sent after the slot is filled; supports {value}"
    )
    order: int = Field(default=DEFAULT_SLOT_ORDER, description="Prompt priority, lower first")
    enabled: bool = Field(default=True, description="Enabled until a request changes it")
    confirm_with: str | None = Field(
        default=None, description="Slot of the same ability that confirms this one"
    )
    description: str = ""


class AbilityConfig(BaseModel):
    """Declarative ability definition."""

    description: str = ""
    slots: list[SlotConfig] = Field(default_factory=list)
    complete_message: str | None = Field(
        default=None, description="Message sent on completion; formatted with slot values"
    )
    next_ability: str | None = Field(
        default=None, description="Ability focused after this one completes"
    )

    @model_validator(mode="after")
    def _check_confirmations(self) -> "AbilityConfig":
        names = {slot.name for slot in self.slots}
        for slot in self.slots:
            if slot.confirm_with is not None and slot.confirm_with not in names:
                raise ValueError(
                    f"Slot '{slot.name}' is confirmed with unknown slot '{slot.confirm_with}'"
                )
        return self


class ParleyConfig(BaseModel):
    """Root configuration with versioning."""

    version: str = Field(default=CURRENT_VERSION, description="Config file version")
    settings: Settings = Field(default_factory=Settings)
    abilities: dict[str, AbilityConfig] = Field(default_factory=dict)

    def model_post_init(self, __context: object) -> None:
        """Validate config version and default ability after initialization."""
        if self.version not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported config version: {self.version}. "
                f"Supported: {', '.join(sorted(SUPPORTED_VERSIONS))}"
            )
        default = self.settings.default_ability
        if default is not None and self.abilities and default not in self.abilities:
            raise ValueError(f"Default ability '{default}' is not defined")
