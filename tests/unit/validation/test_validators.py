"""Tests for the validator registry and built-in validators."""

from datetime import date, timedelta

import pytest

from parley.core.errors import ConfigError
from parley.validation import ValidatorRegistry
from parley.validation.validators import normalize_answer


class TestValidatorRegistry:
    def test_register_and_validate(self):
        @ValidatorRegistry.register("even_test", "Even numbers only.")
        def is_even(value):
            return int(value) % 2 == 0

        try:
            assert ValidatorRegistry.is_registered("even_test")
            assert ValidatorRegistry.validate("even_test", "4")
            assert not ValidatorRegistry.validate("even_test", "3")
            assert ValidatorRegistry.default_message("even_test") == "Even numbers only."
        finally:
            ValidatorRegistry.unregister("even_test")
        assert not ValidatorRegistry.is_registered("even_test")

    def test_raising_check_counts_as_rejection(self):
        assert not ValidatorRegistry.validate("positive_number", "twelve")

    def test_unknown_validator_raises(self):
        with pytest.raises(ConfigError, match="not registered"):
            ValidatorRegistry.get("does_not_exist")

    def test_builtins_are_listed(self):
        names = ValidatorRegistry.list_validators()
        for name in ("non_empty", "yes_no", "city_name", "iata_code", "integer", "positive_number", "email", "future_date"):
            assert name in names


class TestBuiltinValidators:
    def test_non_empty(self):
        assert ValidatorRegistry.validate("non_empty", "x")
        assert not ValidatorRegistry.validate("non_empty", "   ")
        assert not ValidatorRegistry.validate("non_empty", None)

    def test_yes_no(self):
        assert ValidatorRegistry.validate("yes_no", "Yes!")
        assert ValidatorRegistry.validate("yes_no", "nope")
        assert not ValidatorRegistry.validate("yes_no", "perhaps")
        assert normalize_answer(" OK. ") == "ok"

    def test_city_and_airport(self):
        assert ValidatorRegistry.validate("city_name", "New York")
        assert not ValidatorRegistry.validate("city_name", "42")
        assert ValidatorRegistry.validate("iata_code", "jfk")
        assert not ValidatorRegistry.validate("iata_code", "JFKX")

    def test_numbers(self):
        assert ValidatorRegistry.validate("integer", "12")
        assert ValidatorRegistry.validate("integer", 3)
        assert not ValidatorRegistry.validate("integer", "1.5")
        assert not ValidatorRegistry.validate("integer", True)
        assert ValidatorRegistry.validate("positive_number", "0.5")
        assert not ValidatorRegistry.validate("positive_number", "0")

    def test_email(self):
        assert ValidatorRegistry.validate("email", "ana@example.com")
        assert not ValidatorRegistry.validate("email", "ana@example")

    def test_future_date(self):
        tomorrow = date.today() + timedelta(days=1)
        assert ValidatorRegistry.validate("future_date", tomorrow.isoformat())
        assert ValidatorRegistry.validate("future_date", tomorrow)
        assert not ValidatorRegistry.validate("future_date", "2000-01-01")
        assert not ValidatorRegistry.validate("future_date", "next week")
