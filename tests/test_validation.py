from datetime import datetime

import pytest

from accounting_app.core.errors import ValidationError
from accounting_app.core.validation import (
    apply_updates,
    parse_id,
    parse_int,
    parse_timestamp,
    reject_nulls,
    require_expense_fields,
    require_name,
    to_naive_utc,
)
from accounting_app.models.user import User


@pytest.mark.parametrize("raw, expected", [("7", 7), (" 42 ", 42), ("-3", -3), (5, 5)])
def test_parse_int_accepts_whole_numbers(raw, expected):
    assert parse_int(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", "1.5", "1e3", None, True])
def test_parse_int_rejects_everything_else(raw):
    assert parse_int(raw) is None


def test_parse_id_raises_on_non_numeric():
    with pytest.raises(ValidationError):
        parse_id("abc")


def test_parse_timestamp_handles_dates_and_offsets():
    assert parse_timestamp("2024-01-31") == datetime(2024, 1, 31)
    assert parse_timestamp("2024-01-31T10:00:00+02:00") == datetime(2024, 1, 31, 8, 0)
    assert parse_timestamp("2024-01-31T10:00:00Z") == datetime(2024, 1, 31, 10, 0)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("2024-13-01") is None


def test_to_naive_utc_keeps_naive_values():
    value = datetime(2024, 5, 1, 9, 30)
    assert to_naive_utc(value) is value


@pytest.mark.parametrize("name", ["", "   ", None, 12, ["x"]])
def test_require_name_rejects_blank_or_non_string(name):
    with pytest.raises(ValidationError):
        require_name(name)


def test_require_name_returns_value_untrimmed():
    assert require_name("  Bob ") == "  Bob "


def test_expense_amount_zero_is_allowed():
    require_expense_fields(
        {"user_id": 1, "spent_at": datetime(2024, 1, 1), "title": "Gift", "amount": 0}
    )


@pytest.mark.parametrize(
    "missing",
    [
        {"user_id": 0},
        {"spent_at": None},
        {"title": ""},
    ],
)
def test_expense_falsy_required_fields_are_rejected(missing):
    data = {"user_id": 1, "spent_at": datetime(2024, 1, 1), "title": "Gift", "amount": 3}
    data.update(missing)
    with pytest.raises(ValidationError):
        require_expense_fields(data)


def test_expense_missing_amount_is_rejected():
    with pytest.raises(ValidationError):
        require_expense_fields({"user_id": 1, "spent_at": datetime(2024, 1, 1), "title": "Gift"})


def test_reject_nulls_only_checks_present_fields():
    reject_nulls({"note": None}, ["title"])
    with pytest.raises(ValidationError):
        reject_nulls({"title": None}, ["title"])


def test_apply_updates_merges_present_fields_only():
    user = User(id=1, name="Alice", updated_at=datetime(2020, 1, 1))
    apply_updates(user, {})
    assert user.name == "Alice"
    assert user.updated_at > datetime(2020, 1, 1)

    apply_updates(user, {"name": "Alicia"})
    assert user.name == "Alicia"


def test_parse_int_is_bounded_to_64_bits():
    assert parse_int(str(2 ** 63 - 1)) == 2 ** 63 - 1
    assert parse_int(str(-(2 ** 63))) == -(2 ** 63)
    assert parse_int(str(2 ** 63)) is None
    assert parse_int(2 ** 64) is None
    assert parse_int("9" * 5000) is None
