"""
Locale vocabulary for the transcript parser.

Every word list the pipeline consults lives here, loaded from
``vocabulary.json`` through the ConfigLoader and frozen on load:

- income markers (direction)
- slang amounts, currency prefix, magnitude markers, small-purchase words
- date patterns and phrases
- filler words and the default note (description)
- one ordered lexicon per direction (categorization)

Swapping the JSON file swaps the locale without touching pipeline code.
"""
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Pattern, Tuple

from voice_tracker.config.settings import ConfigLoader
from voice_tracker.domain.enums import Category, Direction, category_from_label
from voice_tracker.logging_setup import get_logger

logger = get_logger(__name__)

Lexicon = Mapping[Category, Tuple[str, ...]]


@dataclass(frozen=True, eq=False)
class Vocabulary:
    """Immutable bundle of all locale tables."""
    locale: str
    default_note: str
    income_markers: Tuple[str, ...]
    slang_amounts: Mapping[str, Decimal]
    currency_prefix: str
    thousand_markers: Tuple[str, ...]
    million_markers: Tuple[str, ...]
    small_purchase_words: Tuple[str, ...]
    days_ago_pattern: Pattern[str]
    two_days_ago_phrases: Tuple[str, ...]
    yesterday_phrases: Tuple[str, ...]
    day_of_month_pattern: Pattern[str]
    date_words: Tuple[str, ...]
    filler_words: Tuple[str, ...]
    lexicons: Mapping[Direction, Lexicon]

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Vocabulary":
        """
        Build a vocabulary from a parsed ``vocabulary.json`` dict.

        Args:
            config: Parsed configuration

        Raises:
            ValueError: If a table is missing or malformed, or a lexicon
                names a category that does not exist for its direction

        Example (testing):
            test_config = ConfigLoader.load_vocabulary_config()
            test_config["amounts"]["slang"]["gocap"] = 50
            vocabulary = Vocabulary.from_config(test_config)
        """
        try:
            amounts = config["amounts"]
            dates = config["dates"]

            return cls(
                locale=config.get("locale", ""),
                default_note=str(config["default_note"]),
                income_markers=_terms(config["income_markers"]),
                slang_amounts=_slang_table(amounts["slang"]),
                currency_prefix=str(amounts["currency_prefix"]).lower(),
                thousand_markers=_terms(amounts["thousand_markers"]),
                million_markers=_terms(amounts["million_markers"]),
                small_purchase_words=_terms(amounts["small_purchase_words"]),
                days_ago_pattern=_number_pattern(dates["days_ago"]),
                two_days_ago_phrases=_terms(dates["two_days_ago"]),
                yesterday_phrases=_terms(dates["yesterday"]),
                day_of_month_pattern=_number_pattern(dates["day_of_month"]),
                date_words=_terms(dates["words"]),
                filler_words=_terms(config["filler_words"]),
                lexicons=MappingProxyType({
                    direction: _lexicon(direction, config["lexicons"][direction.value])
                    for direction in Direction
                }),
            )
        except KeyError as e:
            raise ValueError(f"Vocabulary config is missing required key: {e}")
        except re.error as e:
            raise ValueError(f"Vocabulary config has an invalid date pattern: {e}")

    def lexicon_for(self, direction: Direction) -> Lexicon:
        """Return the ordered lexicon of a direction"""
        return self.lexicons[direction]

    def __repr__(self) -> str:
        return (
            f"Vocabulary({self.locale}, {len(self.slang_amounts)} slang terms, "
            f"{sum(len(lex) for lex in self.lexicons.values())} lexicon categories)"
        )


def _terms(values: List[str]) -> Tuple[str, ...]:
    if isinstance(values, str) or not isinstance(values, list):
        raise ValueError(f"Expected a list of terms, got {values!r}")
    return tuple(str(v).strip().lower() for v in values if str(v).strip())


def _number_pattern(pattern: str) -> Pattern[str]:
    # Group 1 must capture the number the phrase is about
    compiled = re.compile(pattern, re.IGNORECASE)
    if compiled.groups < 1:
        raise ValueError(f"Date pattern '{pattern}' must capture a number in group 1")
    return compiled


def _slang_table(table: Dict[str, Any]) -> Mapping[str, Decimal]:
    slang: Dict[str, Decimal] = {}
    for term, value in table.items():
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"Slang term '{term}' has a non-numeric value: {value!r}")
        if amount <= 0:
            raise ValueError(f"Slang term '{term}' must have a positive value, got {value!r}")
        slang[term.strip().lower()] = amount
    return MappingProxyType(slang)


def _lexicon(direction: Direction, table: Dict[str, List[str]]) -> Lexicon:
    lexicon: Dict[Category, Tuple[str, ...]] = {}
    for label, terms in table.items():
        lexicon[category_from_label(direction, label)] = _terms(terms)
    return MappingProxyType(lexicon)


@lru_cache(maxsize=1)
def _default_vocabulary() -> Vocabulary:
    vocabulary = Vocabulary.from_config(ConfigLoader.load_vocabulary_config())
    logger.debug("Loaded %r", vocabulary)
    return vocabulary


def load_vocabulary(config: Optional[Dict[str, Any]] = None) -> Vocabulary:
    """
    Load the vocabulary.

    Args:
        config: Optional config dict. If None, the vocabulary is loaded once
            from the ConfigLoader and reused for the life of the process.

    Returns:
        The frozen vocabulary
    """
    if config is not None:
        return Vocabulary.from_config(config)
    return _default_vocabulary()
