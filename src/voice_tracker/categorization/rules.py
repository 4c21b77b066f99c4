from typing import Dict, List, Mapping, Optional, Pattern, Sequence

from voice_tracker.categorization.base import CategorizationRule
from voice_tracker.domain.enums import Category, Direction, category_enum_for
from voice_tracker.extraction.text import word_pattern
from voice_tracker.logging_setup import get_logger

logger = get_logger(__name__)


class KeywordRule(CategorizationRule):
    """
    Rule that matches trigger words in a transcript.

    Features:
    - Case-insensitive, whole-word matching ("es" does not match "beres")
    - Multiple trigger words per category, multi-word phrases allowed
    - Categories are tried in lexicon order; the first hit wins
    - Can be direction specific (income vs expense)

    Example:
        ```
        # "nasi" or "kopi" -> Makanan & Minuman
        rule = KeywordRule({
            ExpenseCategory.FOOD_AND_DRINK: ["nasi", "kopi"]
        }, Direction.EXPENSE)
        ```
    """

    def __init__(
            self,
            keyword_map: Mapping[Category, Sequence[str]],
            direction: Optional[Direction] = None
        ):
        """
        Initialize keyword rule

        Args:
            keyword_map: Ordered mapping of categories to trigger words.
                Example: `{ExpenseCategory.BILLS: ["listrik", "pdam"]}`
            direction: Optional filter for INCOME or EXPENSE only

        Raises:
            ValueError: If a category does not belong to the direction
        """
        super().__init__()
        self.keyword_map = keyword_map
        self.direction = direction

        if direction is not None:
            enum_cls = category_enum_for(direction)
            foreign = [c for c in keyword_map if not isinstance(c, enum_cls)]
            if foreign:
                raise ValueError(
                    f"Categories {foreign} do not belong to {direction.value} transactions"
                )

        # One compiled pattern per category, in lexicon order
        self._patterns: Dict[Category, Pattern[str]] = {
            category: word_pattern(keywords)
            for category, keywords in keyword_map.items()
        }

    def _first_hit(self, transcript: str) -> Optional[Category]:
        for category, pattern in self._patterns.items():
            match = pattern.search(transcript)
            if match:
                logger.debug("'%s' -> %s", match.group(0), category.value)
                return category
        return None

    def _matches(self, transcript: str, direction: Direction) -> bool:
        """Check if any trigger word occurs in the transcript"""

        if self.direction and direction != self.direction:
            return False

        return self._first_hit(transcript) is not None

    def _get_category(self, transcript: str, direction: Direction) -> Category:
        """Return the first category in lexicon order with a hit."""

        category = self._first_hit(transcript)
        if category is None:
            # _matches must have made a whoopsie
            raise RuntimeError("_get_category called but no match found")
        return category

    def __repr__(self):
        num_categories = len(self.keyword_map)
        direction_filter = f", direction={self.direction.value}" if self.direction else ""
        return f"KeywordRule({num_categories} categories{direction_filter})"


class DefaultRule(CategorizationRule):
    """
    Fallback rule that always matches.

    Should be the last rule in the chain.
    Returns the fallback category of the transcript's direction.
    """

    def __init__(self, fallbacks: Mapping[Direction, Category]):
        """
        Initialize the default rule.

        Args:
            fallbacks: The category to return for each direction
        """
        super().__init__()
        missing: List[Direction] = [d for d in Direction if d not in fallbacks]
        if missing:
            raise ValueError(f"No fallback category for {[d.value for d in missing]}")
        self.fallbacks = fallbacks

    def _matches(self, transcript: str, direction: Direction) -> bool:
        """Always matches"""
        return True

    def _get_category(self, transcript: str, direction: Direction) -> Category:
        """Only returns the fallback category."""
        return self.fallbacks[direction]

    def __repr__(self) -> str:
        labels = ", ".join(f"{d.value}='{c.value}'" for d, c in self.fallbacks.items())
        return f"DefaultRule({labels})"
