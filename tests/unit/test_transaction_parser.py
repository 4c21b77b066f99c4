import pytest
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal

from voice_tracker import parse_transaction
from voice_tracker.categorization import CategorizationEngine
from voice_tracker.domain.enums import Direction, ExpenseCategory, IncomeCategory
from voice_tracker.domain.errors import AmountNotFoundError
from voice_tracker.domain.models import ParsedTransaction
from voice_tracker.services.transaction_parser import TransactionParser


@pytest.mark.unit
class TestParse:
    """Whole pipeline, one transcript at a time"""

    def test_slang_expense_yesterday(self, parser: TransactionParser):
        # Act
        txn = parser.parse("beli nasi padang goceng kemarin")

        # Assert
        assert txn.direction == Direction.EXPENSE
        assert txn.amount == Decimal("5000")
        assert txn.category == ExpenseCategory.FOOD_AND_DRINK
        assert txn.occurred_on == date(2025, 3, 9)
        assert txn.note == "Nasi padang"

    def test_salary(self, parser: TransactionParser):
        txn = parser.parse("dapat gaji 5 juta")

        assert txn.direction == Direction.INCOME
        assert txn.amount == Decimal("5000000")
        assert txn.category == IncomeCategory.SALARY
        assert txn.occurred_on == date(2025, 3, 10)
        assert txn.note == "Gaji"

    def test_bill(self, parser: TransactionParser):
        txn = parser.parse("bayar listrik 150 ribu")

        assert txn.direction == Direction.EXPENSE
        assert txn.amount == Decimal("150000")
        assert txn.category == ExpenseCategory.BILLS
        assert txn.occurred_on == date(2025, 3, 10)
        assert txn.note == "Listrik"

    def test_small_purchase_in_thousands(self, parser: TransactionParser):
        txn = parser.parse("parkir 2")

        assert txn.amount == Decimal("2000")
        assert txn.category == ExpenseCategory.TRANSPORT
        assert txn.note == "Parkir"

    def test_no_amount(self, parser: TransactionParser):
        with pytest.raises(AmountNotFoundError, match="halo dunia"):
            parser.parse("halo dunia")

    @pytest.mark.parametrize("transcript", [
        "transfer " + "1" * 30,
        "beli kopi " + "9" * 29 + " ribu",
    ])
    def test_overlong_number_is_no_amount(self, parser: TransactionParser, transcript: str):
        with pytest.raises(AmountNotFoundError):
            parser.parse(transcript)

    def test_overlong_day_count(self, parser: TransactionParser):
        txn = parser.parse("beli kopi 20 ribu " + "9" * 5000 + " hari lalu")

        assert txn.amount == Decimal("20000")
        assert txn.occurred_on == date.min
        assert txn.note == "Kopi"

    def test_nothing_left_for_the_note(self, parser: TransactionParser):
        txn = parser.parse("bayar 20 ribu kemarin")

        assert txn.note == "Transaksi"
        assert txn.category == ExpenseCategory.OTHER
        assert txn.occurred_on == date(2025, 3, 9)

    def test_explicit_today_overrides_clock(self, parser: TransactionParser):
        txn = parser.parse("kemarin beli kopi 20 ribu", today=date(2025, 1, 1))

        assert txn.occurred_on == date(2024, 12, 31)

    def test_clock_is_used_when_no_today(self, vocabulary):
        # Arrange
        parser = TransactionParser(vocabulary=vocabulary, clock=lambda: date(2025, 1, 1))

        # Act
        txn = parser.parse("kopi 15 ribu")

        # Assert
        assert txn.occurred_on == date(2025, 1, 1)

    def test_parse_is_repeatable(self, parser: TransactionParser):
        """No state carries over between calls"""
        first = parser.parse("dapat gaji 5 juta")
        parser.parse("beli nasi padang goceng kemarin")
        second = parser.parse("dapat gaji 5 juta")

        assert first == second

    def test_module_function(self):
        txn = parse_transaction("bayar listrik 150 ribu", today=date(2025, 3, 10))

        assert isinstance(txn, ParsedTransaction)
        assert txn.category == ExpenseCategory.BILLS


@pytest.mark.unit
class TestParserCollaborators:

    def test_category_reads_original_transcript(self, vocabulary, mocker):
        """The engine sees the whole transcript, not the cleaned note"""

        # Arrange
        engine = mocker.Mock(spec=CategorizationEngine)
        engine.classify.return_value = ExpenseCategory.SHOPPING
        parser = TransactionParser(vocabulary=vocabulary, categorization_engine=engine)

        # Act
        txn = parser.parse("beli nasi padang goceng kemarin", today=date(2025, 3, 10))

        # Assert
        engine.classify.assert_called_once_with(
            "beli nasi padang goceng kemarin", Direction.EXPENSE
        )
        assert txn.category == ExpenseCategory.SHOPPING

    def test_fails_before_categorizing(self, vocabulary, mocker):
        engine = mocker.Mock(spec=CategorizationEngine)
        parser = TransactionParser(vocabulary=vocabulary, categorization_engine=engine)

        with pytest.raises(AmountNotFoundError):
            parser.parse("halo dunia")

        engine.classify.assert_not_called()

    def test_engine_is_created_lazily(self, vocabulary):
        parser = TransactionParser(vocabulary=vocabulary)

        assert parser._categorization_engine is None
        assert isinstance(parser.categorization_engine, CategorizationEngine)
        assert parser.categorization_engine is parser.categorization_engine


@pytest.mark.unit
class TestParseMany:

    def test_collects_failures(self, parser: TransactionParser):
        # Arrange
        transcripts = [
            "beli kopi 15 ribu",
            "",
            "   ",
            "halo dunia",
            "dapat gaji 5 juta",
        ]

        # Act
        result = parser.parse_many(transcripts)

        # Assert
        assert result.total == 3
        assert len(result.parsed) == 2
        assert [f.transcript for f in result.failed] == ["halo dunia"]
        assert "No amount found" in result.failed[0].message
        assert result.total_income == Decimal("5000000")
        assert result.total_expense == Decimal("15000")
        assert not result.success

    def test_strips_transcripts(self, parser: TransactionParser):
        result = parser.parse_many(["  parkir 2\n"])

        assert result.success
        assert result.parsed[0].note == "Parkir"

    def test_shares_one_today(self, parser: TransactionParser):
        result = parser.parse_many(
            ["kemarin kopi 10 ribu", "bensin 20 ribu"], today=date(2025, 2, 1)
        )

        assert [t.occurred_on for t in result.parsed] == [date(2025, 1, 31), date(2025, 2, 1)]


@pytest.mark.unit
class TestParserProperties:

    @pytest.mark.parametrize("verb", ["beli", "bayar", "isi"])
    @pytest.mark.parametrize("word", ["nasi", "kopi", "parkir", "bensin", "ojek"])
    @pytest.mark.parametrize("number", [1, 25, 999])
    def test_small_purchase_numbers_read_in_thousands(
        self, parser: TransactionParser, verb: str, word: str, number: int
    ):
        txn = parser.parse(f"{verb} {word} {number}")

        assert txn.amount == Decimal(number) * 1000

    def test_concurrent_parses_agree(self, parser: TransactionParser):
        """Parsing shares only read-only tables"""

        # Arrange
        transcripts = [
            "beli nasi padang goceng kemarin",
            "dapat gaji 5 juta",
            "bayar listrik 150 ribu",
            "parkir 2",
        ] * 25
        expected = [parser.parse(t) for t in transcripts]

        # Act
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(parser.parse, transcripts))

        # Assert
        assert results == expected
