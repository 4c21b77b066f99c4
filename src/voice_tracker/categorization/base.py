from abc import ABC, abstractmethod
from typing import Optional

from voice_tracker.domain.enums import Category, Direction

class CategorizationRule(ABC):
    """
    Abstract base class for all categorization rules.

    Implements Chain of Responsibility:
    - Each rule tries to categorize a transcript
    - If it can't it passes to the next rule
    - Rules are tried in priority order

    Usage:
        Create chain: specific -> general -> default
        ```
        expense_rule = KeywordRule(expense_lexicon, Direction.EXPENSE)
        income_rule = KeywordRule(income_lexicon, Direction.INCOME)
        default_rule = DefaultRule(FALLBACK_CATEGORIES)

        expense_rule.set_next(income_rule).set_next(default_rule)

        category = expense_rule.categorize(transcript, Direction.EXPENSE)
        ```
    """

    def __init__(self):
        self._next_rule: Optional['CategorizationRule'] = None


    def set_next(self, rule: 'CategorizationRule') -> 'CategorizationRule':
        """
        Set the next rule in the chain.

        Args:
            rule: The next rule to try if this one doesn't match

        Returns:
            The rule that was set (for chaining)

        Example:
            `rule1.set_next(rule2).set_next(rule3)`
        """
        self._next_rule = rule
        return rule

    @abstractmethod
    def _matches(self, transcript: str, direction: Direction) -> bool:
        """
        Check if this rule matches the transcript.

        Subclasses implement their specific matching logic here.

        Args:
            transcript: Transcript to check
            direction: Direction already detected for the transcript

        Returns:
            True if this rule can categorize this transcript
        """
        pass


    @abstractmethod
    def _get_category(self, transcript: str, direction: Direction) -> Category:
        """
        Get the category for the transcript

        Called only if _matches() returns True.

        Args:
            transcript: Transcript to categorize
            direction: Direction already detected for the transcript

        Returns:
            Category
        """
        pass


    def categorize(self, transcript: str, direction: Direction) -> Optional[Category]:
        """
        Attempt to categorize a transcript.

        This is the main method called by clients. It:
        1. Checks if a rule matches
        2. If yes, returns the category
        3. If no, tries the next rule in the chain

        Args:
            transcript: Transcript to categorize
            direction: Direction already detected for the transcript

        Returns:
            Category, or None if no rules matched
        """
        if self._matches(transcript, direction):
            return self._get_category(transcript, direction)

        if self._next_rule:
            return self._next_rule.categorize(transcript, direction)

        return None

    def __repr__(self):
        return f"{self.__class__.__name__}()"
