"""
Categorization system for transcripts.

Picks one category per transcript using a chain of responsibility
over the ordered lexicon of the transcript's direction.

Quick Start:
    >>> from voice_tracker.categorization import CategorizationEngine
    >>> from voice_tracker.domain.enums import Direction
    >>>
    >>> engine = CategorizationEngine()
    >>> category = engine.classify("beli nasi padang", Direction.EXPENSE)
    >>> print(f"Categorized as: {category.value}")
"""
from voice_tracker.categorization.categorizer import CategorizationEngine, classify
from voice_tracker.categorization.base import CategorizationRule
from voice_tracker.categorization.rules import (
    KeywordRule,
    DefaultRule
)

__all__ = [
    "CategorizationEngine",
    "CategorizationRule",
    "KeywordRule",
    "DefaultRule",
    "classify",
]
