"""Tests for argument validation and the Expense record."""

from datetime import date
from decimal import Decimal, localcontext

import pytest

from expenses.exceptions import ValidationError
from expenses.models import Expense, parse_date
from expenses.validators import parse_amount, parse_expense_id, validate_memo


class TestParseAmount:
    """Amount parsing and rounding."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("12", Decimal("12.00")),
            ("5.5", Decimal("5.50")),
            ("3.456", Decimal("3.46")),
            ("2.345", Decimal("2.35")),
            (" 7.10 ", Decimal("7.10")),
            ("-4.25", Decimal("-4.25")),
        ],
    )
    def test_rounds_to_two_places(self, raw, expected):
        amount = parse_amount(raw)
        assert amount == expected
        assert amount.as_tuple().exponent == -2

    @pytest.mark.parametrize("raw", ["0", "0.00", "0.004", "-0.001"])
    def test_rejects_zero(self, raw):
        with pytest.raises(ValidationError, match="must not be zero"):
            parse_amount(raw)

    @pytest.mark.parametrize("raw", ["abc", "", "12,50", "1.2.3"])
    def test_rejects_non_numeric(self, raw):
        with pytest.raises(ValidationError, match="numeric"):
            parse_amount(raw)

    @pytest.mark.parametrize("raw", ["NaN", "Infinity", "-inf"])
    def test_rejects_non_finite(self, raw):
        with pytest.raises(ValidationError):
            parse_amount(raw)

    @pytest.mark.parametrize(
        "raw",
        ["1e30", "100000000", "-100000000", "99999999.996", "1234567890123456789012345678901"],
    )
    def test_rejects_amounts_beyond_column_precision(self, raw):
        with pytest.raises(ValidationError, match="at most"):
            parse_amount(raw)

    def test_accepts_largest_column_value(self):
        assert parse_amount("-99999999.99") == Decimal("-99999999.99")

    def test_rounding_failure_is_a_validation_error(self):
        with localcontext() as ctx:
            ctx.prec = 5
            with pytest.raises(ValidationError, match="rounded"):
                parse_amount("123456.78")

    def test_rejects_missing(self):
        with pytest.raises(ValidationError, match="required"):
            parse_amount(None)


class TestValidateMemo:
    def test_keeps_memo_verbatim(self):
        assert validate_memo("  Gas bill ") == "  Gas bill "

    @pytest.mark.parametrize("raw", ["", "   ", None, 12])
    def test_rejects_blank_or_non_string(self, raw):
        with pytest.raises(ValidationError):
            validate_memo(raw)


class TestParseExpenseId:
    def test_integer_tokens(self):
        assert parse_expense_id("7") == 7
        assert parse_expense_id(" 12 ") == 12

    @pytest.mark.parametrize("raw", ["abc", "1.5", "", None])
    def test_non_integer_tokens(self, raw):
        assert parse_expense_id(raw) is None


class TestExpenseRecord:
    """Explicit column mapping at the storage boundary."""

    def test_from_row_with_sqlite_natives(self):
        expense = Expense.from_row(
            {"id": 3, "amount": 5.5, "memo": "Bus fare", "created_on": "2024-03-15"}
        )
        assert expense == Expense(3, Decimal("5.50"), "Bus fare", date(2024, 3, 15))

    def test_from_row_with_driver_types(self):
        expense = Expense.from_row(
            {"id": 1, "amount": Decimal("12.00"), "memo": "Coffee", "created_on": date(2024, 1, 2)}
        )
        assert expense.amount == Decimal("12.00")
        assert expense.created_on == date(2024, 1, 2)

    def test_integer_amount_gains_two_places(self):
        expense = Expense.from_row(
            {"id": 1, "amount": 12, "memo": "Coffee", "created_on": "2024-01-02"}
        )
        assert str(expense.amount) == "12.00"

    def test_parse_date_accepts_timestamp_strings(self):
        assert parse_date("2024-01-02 00:00:00") == date(2024, 1, 2)
