from functools import lru_cache
from typing import Optional, Pattern

from voice_tracker.domain.enums import Direction
from voice_tracker.extraction.text import word_pattern
from voice_tracker.extraction.vocabulary import Vocabulary, load_vocabulary
from voice_tracker.logging_setup import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=8)
def _income_pattern(vocabulary: Vocabulary) -> Pattern[str]:
    return word_pattern(vocabulary.income_markers)


def detect_direction(transcript: str, vocabulary: Optional[Vocabulary] = None) -> Direction:
    """
    Classify a transcript as income or expense.

    Any income marker ("dapat", "terima", "gaji", "jual", ...) present as a
    whole word makes it income. Everything else is an expense.

    Args:
        transcript: Raw transcript
        vocabulary: Optional vocabulary. Defaults to the loaded locale.

    Returns:
        Direction.INCOME or Direction.EXPENSE
    """
    vocabulary = vocabulary or load_vocabulary()

    match = _income_pattern(vocabulary).search(transcript)
    if match:
        logger.debug("Income marker '%s' found", match.group(0))
        return Direction.INCOME

    # Default to expense
    return Direction.EXPENSE
