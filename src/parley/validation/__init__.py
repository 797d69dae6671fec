"""Named validators for declarative slots."""

# Import validators to auto-register them
from parley.validation import validators  # noqa: F401
from parley.validation.registry import ValidatorRegistry

__all__ = ["ValidatorRegistry"]
