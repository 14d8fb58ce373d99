"""Tests for field normalization."""

from datetime import datetime

import pytest

from ledgerbook.models.record import Currency, TransactionKind
from ledgerbook.services.importer import InvalidFormat, resolve_header
from ledgerbook.validation import (
    RowNormalizer,
    parse_amount,
    parse_currency,
    parse_date,
    parse_kind,
)

HEADER = "时间,类型,币种,金额,一级分类,二级分类,项目,备注".split(",")


class TestParseDate:
    """Tests for the accepted date layouts."""

    @pytest.mark.parametrize("text,expected", [
        ("2024-01-05", datetime(2024, 1, 5)),
        ("2024/1/5", datetime(2024, 1, 5)),
        ("2024/1/5 14:30", datetime(2024, 1, 5, 14, 30)),
        ("1/5/2024", datetime(2024, 1, 5)),
        ("1/5/24", datetime(2024, 1, 5)),
        ("1/5/24, 2:30 PM", datetime(2024, 1, 5, 14, 30)),
        ("1/5/24 2:30 PM", datetime(2024, 1, 5, 14, 30)),
        ("25/12/2024", datetime(2024, 12, 25)),
        ("25/12/2024 08:15", datetime(2024, 12, 25, 8, 15)),
    ])
    def test_formats(self, text, expected):
        assert parse_date(text) == expected

    def test_month_first_wins_when_ambiguous(self):
        assert parse_date("03/04/2024") == datetime(2024, 3, 4)

    def test_free_form_fallback(self):
        assert parse_date("5 Jan 2024 10:00") == datetime(2024, 1, 5, 10, 0)

    def test_narrow_space_before_meridiem(self):
        assert parse_date("1/5/24, 2:30\u202fPM") == datetime(2024, 1, 5, 14, 30)

    @pytest.mark.parametrize("text", ["", "   ", "not a date", "2024-13-45"])
    def test_invalid(self, text):
        with pytest.raises(InvalidFormat) as exc_info:
            parse_date(text, line_number=4)
        assert exc_info.value.field == "datetime"
        assert exc_info.value.line_number == 4

    @pytest.mark.parametrize("text", ["12", "3.5", "Jan", "Jan 5", "14:30", "March 2024"])
    def test_partial_dates_are_rejected(self, text):
        with pytest.raises(InvalidFormat):
            parse_date(text)

    def test_free_form_date_only(self):
        assert parse_date("January 5, 2024") == datetime(2024, 1, 5)


class TestParseAmount:
    """Tests for amount parsing into minor units."""

    @pytest.mark.parametrize("text,expected", [
        ("25.50", 2550),
        ("1,234.5", 123450),
        ("1 000", 100000),
        ("0.005", 1),
        ("  7 ", 700),
    ])
    def test_valid(self, text, expected):
        assert parse_amount(text, Currency.SGD) == expected

    @pytest.mark.parametrize("text", ["", "abc", "0", "-5", "0.004", "NaN", "Infinity"])
    def test_invalid(self, text):
        with pytest.raises(InvalidFormat) as exc_info:
            parse_amount(text, Currency.SGD, line_number=2)
        assert exc_info.value.field == "amount"


class TestParseCurrencyAndKind:
    """Tests for closed-set fields."""

    def test_currency(self):
        assert parse_currency(" RMB ") is Currency.RMB

    @pytest.mark.parametrize("text", ["EUR", "sgd", ""])
    def test_currency_invalid(self, text):
        with pytest.raises(InvalidFormat) as exc_info:
            parse_currency(text)
        assert exc_info.value.raw_value == text.strip()

    @pytest.mark.parametrize("text,expected", [
        ("支出", TransactionKind.EXPENSE),
        ("Expense", TransactionKind.EXPENSE),
        ("INCOME", TransactionKind.INCOME),
        ("Out", TransactionKind.EXPENSE),
        ("inc", TransactionKind.INCOME),
        ("收入/Income", TransactionKind.INCOME),
        ("支出 | expenses", TransactionKind.EXPENSE),
    ])
    def test_kind(self, text, expected):
        assert parse_kind(text) is expected

    @pytest.mark.parametrize("text", ["", "transfer", "支出/income"])
    def test_kind_invalid(self, text):
        with pytest.raises(InvalidFormat):
            parse_kind(text)


class TestRowNormalizer:
    """Tests for whole-row normalization and skip rules."""

    def test_candidate_rows_skip_short_and_blank(self):
        normalizer = RowNormalizer(resolve_header(HEADER))
        rows = [
            "2024-01-01,支出,SGD,5,日常,吃饭,,".split(","),
            ["2024-01-02", "支出"],
            ",,,,,,,".split(","),
            "2024-01-03,收入,USD,9,收入,工资收入,,".split(","),
        ]
        candidates = normalizer.candidate_rows(rows)
        assert [line for line, _ in candidates] == [2, 5]
        assert normalizer.skipped_short == 1
        assert normalizer.skipped_blank == 1

    def test_normalize(self):
        normalizer = RowNormalizer(resolve_header(HEADER))
        row = normalizer.normalize(
            " 2024/1/5 14:30 ,支出,SGD,25.50, 日常 ,吃饭, 旅行 ,晚饭".split(","),
            line_number=2,
        )
        assert row.occurred_at == datetime(2024, 1, 5, 14, 30)
        assert row.kind is TransactionKind.EXPENSE
        assert row.amount_minor == 2550
        assert row.category_l1 == "日常"
        assert row.project_name == "旅行"
        assert row.note == "晚饭"
        assert row.line_number == 2

    def test_income_without_level1(self):
        normalizer = RowNormalizer(resolve_header(HEADER))
        row = normalizer.normalize("2024-01-01,收入,RMB,100,,工资收入,,".split(","), 3)
        assert row.category_l1 == "收入"

    def test_expense_without_level1(self):
        normalizer = RowNormalizer(resolve_header(HEADER))
        with pytest.raises(InvalidFormat) as exc_info:
            normalizer.normalize("2024-01-01,支出,RMB,100,,吃饭,,".split(","), 3)
        assert exc_info.value.field == "category_l1"

    def test_missing_optional_columns(self):
        normalizer = RowNormalizer(resolve_header(["Date", "Type", "Currency", "Amount", "CategoryL1", "CategoryL2"]))
        row = normalizer.normalize(["2024-01-01", "expense", "USD", "3", "出行", "地铁"], 2)
        assert row.project_name == ""
        assert row.note == ""

    def test_invalid_currency_names_value_and_line(self):
        normalizer = RowNormalizer(resolve_header(HEADER))
        with pytest.raises(InvalidFormat) as exc_info:
            normalizer.normalize("2024-01-01,支出,EUR,5,日常,吃饭,,".split(","), 7)
        assert "EUR" in str(exc_info.value)
        assert exc_info.value.line_number == 7
