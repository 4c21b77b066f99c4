import re
from abc import ABC, abstractmethod
from decimal import Decimal
from functools import lru_cache
from typing import List, Mapping, Optional

from voice_tracker.domain.errors import AmountNotFoundError
from voice_tracker.domain.models import AmountMatch
from voice_tracker.extraction.text import word_pattern
from voice_tracker.extraction.vocabulary import Vocabulary, load_vocabulary
from voice_tracker.logging_setup import get_logger

logger = get_logger(__name__)

THOUSAND = Decimal(1_000)
MILLION = Decimal(1_000_000)

# Longer digit runs are not amounts anyone says
MAX_AMOUNT_DIGITS = 15


def _too_long(number: str) -> bool:
    return sum(c.isdigit() for c in number) > MAX_AMOUNT_DIGITS


def _to_decimal(number: str) -> Decimal:
    """Parse a spoken number where a single '.' or ',' is the decimal point"""
    return Decimal(number.replace(",", "."))


def _normalize(amount: Decimal) -> Decimal:
    """Drop a zero fractional part: 1500.0 -> 1500"""
    if amount == amount.to_integral_value():
        return amount.quantize(Decimal(1))
    return amount


class AmountRule(ABC):
    """
    Abstract base class for all amount rules.

    Same chain of responsibility as the categorization rules:
    - Each rule looks for one kind of amount notation
    - If it finds nothing positive, the next rule is tried
    - Rules are tried in priority order

    Usage:
        ```
        slang = SlangRule(...)
        slang.set_next(CurrencyNotationRule()).set_next(BareNumberRule(...))

        match = slang.extract("beli kopi goceng")
        ```
    """

    def __init__(self):
        self._next_rule: Optional['AmountRule'] = None

    def set_next(self, rule: 'AmountRule') -> 'AmountRule':
        """
        Set the next rule in the chain.

        Returns:
            The rule that was set (for chaining)
        """
        self._next_rule = rule
        return rule

    @abstractmethod
    def _find(self, transcript: str) -> Optional[AmountMatch]:
        """
        Look for this rule's notation in the transcript.

        Returns:
            The match, or None if the notation is absent
        """
        pass

    def extract(self, transcript: str) -> Optional[AmountMatch]:
        """
        Extract an amount, falling through the chain until a rule yields
        a positive amount.

        Returns:
            The first positive match, or None if no rule found one
        """
        match = self._find(transcript)
        if match is not None and match.amount > 0:
            logger.debug("%r matched '%s' -> %s", self, match.text, match.amount)
            return match

        if self._next_rule:
            return self._next_rule.extract(transcript)

        return None

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class SlangRule(AmountRule):
    """
    Colloquial amount words ("goceng" = 5000, "ceban" = 10000).

    Terms are tried in table order; the first term present as a whole
    word wins, wherever it sits in the transcript.
    """

    def __init__(self, slang_amounts: Mapping[str, Decimal]):
        super().__init__()
        self.slang_amounts = slang_amounts
        self._patterns = [
            (word_pattern([term]), value) for term, value in slang_amounts.items()
        ]

    def _find(self, transcript: str) -> Optional[AmountMatch]:
        for pattern, value in self._patterns:
            match = pattern.search(transcript)
            if match:
                return AmountMatch(amount=value, span=match.span(), text=match.group(0))
        return None

    def __repr__(self):
        return f"SlangRule({len(self.slang_amounts)} terms)"


class CurrencyNotationRule(AmountRule):
    """
    Written currency amounts: "Rp 15.000", "Rp15,000", "Rp. 150.000,00".

    '.' and ',' between digit groups are thousand separators. A trailing
    two-digit group after a separator is sub-unit cents and is dropped.
    """

    def __init__(self, prefix: str = "rp"):
        super().__init__()
        self.prefix = prefix
        self._pattern = re.compile(
            r"\b" + re.escape(prefix) + r"\.?\s*(\d+(?:[.,]\d{3})*)(?:[.,]\d{2})?(?!\d)",
            re.IGNORECASE,
        )

    def _find(self, transcript: str) -> Optional[AmountMatch]:
        for match in self._pattern.finditer(transcript):
            digits = re.sub(r"[.,]", "", match.group(1))
            if _too_long(digits):
                logger.debug("Skipping %d-digit currency amount", len(digits))
                continue
            return AmountMatch(amount=Decimal(digits), span=match.span(), text=match.group(0))
        return None

    def __repr__(self):
        return f"CurrencyNotationRule('{self.prefix}')"


class MagnitudeSuffixRule(AmountRule):
    """
    Numbers followed by a magnitude word: "15 ribu", "20rb", "50k", "1,5 juta".

    The number is multiplied by the rule's multiplier. A single '.' or ','
    inside the number is a decimal point, so "1,5 jt" and "1.5 jt" agree.
    """

    def __init__(self, markers: List[str], multiplier: Decimal):
        super().__init__()
        self.markers = markers
        self.multiplier = multiplier

        alternatives = "|".join(
            re.escape(m) for m in sorted(markers, key=len, reverse=True)
        )
        self._pattern = re.compile(
            r"(?<![\d.,])(\d+(?:[.,]\d+)?)\s*(?:" + alternatives + r")\b",
            re.IGNORECASE,
        )

    def _find(self, transcript: str) -> Optional[AmountMatch]:
        for match in self._pattern.finditer(transcript):
            if _too_long(match.group(1)):
                continue
            amount = _normalize(_to_decimal(match.group(1)) * self.multiplier)
            return AmountMatch(amount=amount, span=match.span(), text=match.group(0))
        return None

    def __repr__(self):
        return f"MagnitudeSuffixRule({'/'.join(self.markers)}, x{self.multiplier})"


class BareNumberRule(AmountRule):
    """
    Fallback: the first number in the transcript, with no magnitude word.

    People say "parkir 2" meaning two thousand. When the number is below
    1000 and the transcript mentions a small purchase (food, parking,
    fuel, rides), the number is read in thousands.

    A number with 3-digit groups ("1.500.000", "2.500") is a grouped
    integer; any other single separator is a decimal point.

    Like the other numeric rules it skips digit runs longer than
    MAX_AMOUNT_DIGITS.
    """

    def __init__(self, small_purchase_words: List[str], prefix: str = "rp"):
        super().__init__()
        self.small_purchase_words = small_purchase_words
        self._small_purchase = word_pattern(small_purchase_words)
        self._pattern = re.compile(
            r"(?:\b" + re.escape(prefix) + r"\.?\s*)?"
            r"(\d{1,3}(?:[.,]\d{3})+(?!\d)|\d+(?:[.,]\d+)?)",
            re.IGNORECASE,
        )
        self._grouped = re.compile(r"^\d{1,3}(?:[.,]\d{3})+$")

    def _find(self, transcript: str) -> Optional[AmountMatch]:
        match = next(
            (m for m in self._pattern.finditer(transcript) if not _too_long(m.group(1))),
            None,
        )
        if not match:
            return None

        number = match.group(1)
        if self._grouped.match(number):
            amount = Decimal(re.sub(r"[.,]", "", number))
        else:
            amount = _to_decimal(number)

        if amount < THOUSAND and self._small_purchase.search(transcript):
            logger.debug("Small purchase detected, reading %s in thousands", amount)
            amount = amount * THOUSAND

        return AmountMatch(amount=_normalize(amount), span=match.span(), text=match.group(0))

    def __repr__(self):
        return f"BareNumberRule({len(self.small_purchase_words)} small-purchase words)"


class AmountExtractor:
    """
    Finds the one amount a transcript talks about.

    Builds a chain of rules in priority order:
    1. Slang terms
    2. Currency notation (Rp ...)
    3. Thousand suffix (ribu/rb/k)
    4. Million suffix (juta/jt)
    5. Bare number with the small-purchase heuristic

    Usage:
        extractor = AmountExtractor(vocabulary)
        match = extractor.extract("bayar listrik 150 ribu")
        match.amount  # Decimal('150000')
    """

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        vocabulary = vocabulary or load_vocabulary()

        rules: List[AmountRule] = [
            SlangRule(vocabulary.slang_amounts),
            CurrencyNotationRule(vocabulary.currency_prefix),
            MagnitudeSuffixRule(list(vocabulary.thousand_markers), THOUSAND),
            MagnitudeSuffixRule(list(vocabulary.million_markers), MILLION),
            BareNumberRule(list(vocabulary.small_purchase_words), vocabulary.currency_prefix),
        ]

        self._rule_chain = rules[0]
        for i in range(len(rules) - 1):
            rules[i].set_next(rules[i + 1])

    def extract(self, transcript: str) -> AmountMatch:
        """
        Extract the amount and the substring it came from.

        Args:
            transcript: Raw transcript

        Returns:
            The amount and its span in the original transcript

        Raises:
            AmountNotFoundError: If no rule finds a positive amount
        """
        match = self._rule_chain.extract(transcript)
        if match is None:
            raise AmountNotFoundError(transcript)
        return match

    def __repr__(self) -> str:
        num_rules = 0
        current = self._rule_chain
        while current:
            num_rules += 1
            current = current._next_rule

        return f"AmountExtractor({num_rules} rules in chain)"


@lru_cache(maxsize=8)
def _extractor_for(vocabulary: Vocabulary) -> AmountExtractor:
    return AmountExtractor(vocabulary)


def extract_amount(transcript: str, vocabulary: Optional[Vocabulary] = None) -> AmountMatch:
    """
    Extract the amount of a transcript with the default rule chain.

    Raises:
        AmountNotFoundError: If the transcript holds no amount
    """
    return _extractor_for(vocabulary or load_vocabulary()).extract(transcript)
