"""Built-in validators available to declarative slots."""

import re
from datetime import date, datetime
from typing import Any

from parley.validation.registry import ValidatorRegistry

YES_WORDS = frozenset({"yes", "y", "yeah", "yep", "sure", "correct", "confirm", "ok", "okay"})
NO_WORDS = frozenset({"no", "n", "nope", "nah", "wrong", "deny", "cancel"})


def normalize_answer(value: Any) -> str:
    return str(value).strip().lower().rstrip(".!")


@ValidatorRegistry.register("non_empty", "I didn't catch that.")
def validate_non_empty(value: Any) -> bool:
    if value is None:
        return False
    return bool(str(value).strip())


@ValidatorRegistry.register("yes_no", "Please answer yes or no.")
def validate_yes_no(value: Any) -> bool:
    answer = normalize_answer(value)
    return answer in YES_WORDS or answer in NO_WORDS


@ValidatorRegistry.register("city_name", "That doesn't look like a city name.")
def validate_city_name(value: Any) -> bool:
    """Letters, spaces and hyphens, at least two characters."""
    if not isinstance(value, str):
        return False
    return bool(re.match(r"^[a-zA-Z\s\-]+$", value)) and len(value.strip()) > 1


@ValidatorRegistry.register("iata_code", "Please use a 3-letter airport code.")
def validate_iata_code(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return bool(re.match(r"^[A-Z]{3}$", value.strip().upper()))


@ValidatorRegistry.register("integer", "Please give a whole number.")
def validate_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return bool(re.match(r"^[+-]?\d+$", str(value).strip()))


@ValidatorRegistry.register("positive_number", "Please give a number greater than zero.")
def validate_positive_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return float(str(value).strip()) > 0


@ValidatorRegistry.register("email", "That doesn't look like an email address.")
def validate_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return bool(re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", value.strip()))


@ValidatorRegistry.register("future_date", "Please give a date in the future (YYYY-MM-DD).")
def validate_future_date(value: Any) -> bool:
    """ISO date or datetime later than today."""
    if isinstance(value, datetime):
        return value.date() > date.today()
    if isinstance(value, date):
        return value > date.today()
    return date.fromisoformat(str(value).strip()[:10]) > date.today()
