from functools import lru_cache
from typing import List, Optional

from voice_tracker.categorization.base import CategorizationRule
from voice_tracker.categorization.rules import KeywordRule, DefaultRule
from voice_tracker.domain.enums import Category, Direction, FALLBACK_CATEGORIES
from voice_tracker.extraction.vocabulary import Vocabulary, load_vocabulary

class CategorizationEngine:
    """
    Main engine for categorizing transcripts.

    Builds a chain of rules in priority order:
    1. Expense lexicon (skipped for income transcripts)
    2. Income lexicon (skipped for expense transcripts)
    3. Default (Lainnya / Pemasukan Lain)

    Within a lexicon the first category in lexicon order wins, so a
    transcript with trigger words for two categories always lands in
    the one listed first.

    Usage:
        # Production - loads the vocabulary from ConfigLoader
        engine = CategorizationEngine()

        # Testing - inject a custom vocabulary
        engine = CategorizationEngine(vocabulary=Vocabulary.from_config(test_config))

        category = engine.classify("bayar listrik 150 ribu", Direction.EXPENSE)
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        """
        Initialize categorization engine.

        Args:
            vocabulary: Optional vocabulary. If None, loads the default one.
        """
        self.vocabulary = vocabulary or load_vocabulary()
        self._rule_chain: Optional[CategorizationRule] = None

        # Build the rule chain
        self._build_rule_chain()

    def _build_rule_chain(self) -> None:
        """Build the chain of responsibility for the direction lexicons."""
        rules: List[CategorizationRule] = [
            KeywordRule(self.vocabulary.lexicon_for(Direction.EXPENSE), Direction.EXPENSE),
            KeywordRule(self.vocabulary.lexicon_for(Direction.INCOME), Direction.INCOME),
            DefaultRule(FALLBACK_CATEGORIES),
        ]

        self._rule_chain = rules[0]
        for i in range(len(rules) - 1):
            rules[i].set_next(rules[i+1])

    def classify(self, transcript: str, direction: Direction) -> Category:
        """
        Categorize a single transcript.

        Args:
            transcript: Raw transcript
            direction: Direction detected for the transcript

        Returns:
            A category belonging to the direction

        Example:
            ```
            >>> engine = CategorizationEngine()
            >>> engine.classify("dapat gaji 5 juta", Direction.INCOME)
            <IncomeCategory.SALARY: 'Gaji'>
            ```
        """
        if not self._rule_chain:
            raise RuntimeError("Rule chain not initialized")

        category = self._rule_chain.categorize(transcript, direction)

        assert category is not None, "Rule chain should never return None"

        return category

    def get_rule_chain_info(self) -> str:
        """
        Get information about the current rule chain.

        Useful for debugging and understanding which rules are active.

        Returns:
            String description of the current rule chain.
        """
        if not self._rule_chain:
            return "No rules loaded"

        rules = []
        current = self._rule_chain
        priority = 1

        while current:
            rules.append(f"{priority}. {current}")
            current = current._next_rule
            priority +=1

        return "\n".join(rules)

    def __repr__(self) -> str:
        num_rules = 0
        current = self._rule_chain
        while current:
            num_rules+=1
            current = current._next_rule

        return f"CategorizationEngine({num_rules} rules in chain)"


@lru_cache(maxsize=8)
def _engine_for(vocabulary: Vocabulary) -> CategorizationEngine:
    return CategorizationEngine(vocabulary)


def classify(
    transcript: str,
    direction: Direction,
    vocabulary: Optional[Vocabulary] = None,
) -> Category:
    """Categorize a transcript with the default engine"""
    return _engine_for(vocabulary or load_vocabulary()).classify(transcript, direction)
