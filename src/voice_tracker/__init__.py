"""
Turn spoken or typed Indonesian transaction phrases into structured records.

Quick Start:
    >>> from datetime import date
    >>> from voice_tracker import parse_transaction
    >>>
    >>> txn = parse_transaction("beli nasi padang goceng kemarin", today=date(2025, 3, 10))
    >>> txn.amount, txn.category.value, txn.occurred_on, txn.note
    (Decimal('5000'), 'Makanan & Minuman', datetime.date(2025, 3, 9), 'Nasi padang')
"""
from voice_tracker.domain.enums import (
    Direction,
    ExpenseCategory,
    IncomeCategory,
    categories_for,
)
from voice_tracker.domain.errors import AmountNotFoundError, VoiceTrackerError
from voice_tracker.domain.models import ParsedTransaction
from voice_tracker.services.transaction_parser import TransactionParser, parse_transaction

__all__ = [
    "AmountNotFoundError",
    "Direction",
    "ExpenseCategory",
    "IncomeCategory",
    "ParsedTransaction",
    "TransactionParser",
    "VoiceTrackerError",
    "categories_for",
    "parse_transaction",
]
