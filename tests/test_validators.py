from datetime import datetime, timedelta

import pytest

from app.validators import (
    parse_int_id,
    int_id_validator,
    optional_string_validator,
    non_empty_string_preserve_case_validator,
)
from app.utils.dates import average_age_days, days_since


@pytest.mark.parametrize("value, expected", [(5, 5), ("5", 5), (" 42 ", 42), (7.0, 7)])
def test_parse_int_id_accepts_numbers_and_numeric_strings(value, expected):
    assert parse_int_id(value) == expected


@pytest.mark.parametrize("value", ["abc", "5a", "", None, True, 2.5, [1]])
def test_parse_int_id_rejects_other_values(value):
    with pytest.raises(ValueError, match="must be a valid number"):
        parse_int_id(value)


def test_int_id_validator_requires_value():
    with pytest.raises(ValueError, match="ordenId is required"):
        int_id_validator("ordenId")("  ")


def test_optional_string_validator_blank_becomes_none():
    validate = optional_string_validator("Notes")
    assert validate("   ") is None
    assert validate(None) is None
    assert validate("  frágil ") == "frágil"


def test_non_empty_string_keeps_case():
    assert non_empty_string_preserve_case_validator("Box")(" b2 ") == "b2"
    with pytest.raises(ValueError, match="Box cannot be empty"):
        non_empty_string_preserve_case_validator("Box")(" ")


def test_average_age_days_skips_missing_dates():
    now = datetime(2026, 3, 10, 12, 0)
    values = [now - timedelta(days=2), None, now - timedelta(days=4, hours=1)]
    assert days_since(values[0], now) == 2
    assert average_age_days(values, now) == 3
    assert average_age_days([None], now) is None
