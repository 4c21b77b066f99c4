import pytest
from datetime import date
from typing import Any, Dict

from voice_tracker.config.settings import ConfigLoader
from voice_tracker.extraction.vocabulary import Vocabulary, load_vocabulary
from voice_tracker.services.transaction_parser import TransactionParser

@pytest.fixture
def today() -> date:
    """A fixed 'today' so relative dates are predictable"""
    return date(2025, 3, 10)

@pytest.fixture
def vocabulary() -> Vocabulary:
    """The packaged Indonesian vocabulary"""
    return load_vocabulary()

@pytest.fixture
def vocabulary_config() -> Dict[str, Any]:
    """A fresh, mutable copy of the packaged vocabulary config"""
    return ConfigLoader.load_vocabulary_config()

@pytest.fixture
def parser(vocabulary: Vocabulary, today: date) -> TransactionParser:
    """Create a parser whose clock is pinned to the 'today' fixture"""
    return TransactionParser(vocabulary=vocabulary, clock=lambda: today)
