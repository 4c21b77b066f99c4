import re
from functools import lru_cache
from typing import Optional, Pattern, Tuple

from voice_tracker.extraction.text import collapse_whitespace, word_pattern
from voice_tracker.extraction.vocabulary import Vocabulary, load_vocabulary

_DIGITS = re.compile(r"\d+")


@lru_cache(maxsize=8)
def _strip_patterns(vocabulary: Vocabulary) -> Tuple[Pattern[str], Pattern[str]]:
    return (
        word_pattern(vocabulary.filler_words),
        word_pattern(vocabulary.date_words),
    )


def clean_description(
    transcript: str,
    amount_span: Optional[Tuple[int, int]] = None,
    vocabulary: Optional[Vocabulary] = None,
) -> str:
    """
    Turn a transcript into a short human-readable note.

    Steps:
    1. Remove the amount substring (only that occurrence)
    2. Remove filler verbs ("beli", "bayar", "rupiah", ...)
    3. Remove date words ("kemarin", "tanggal", ...)
    4. Remove leftover digits
    5. Collapse whitespace and capitalize the first letter

    Args:
        transcript: Raw transcript
        amount_span: (start, end) of the amount in the transcript, if any
        vocabulary: Optional vocabulary. Defaults to the loaded locale.

    Returns:
        The note, or the default note when nothing is left

    Example:
        >>> clean_description("beli nasi padang goceng kemarin", (17, 23))
        'Nasi padang'
    """
    vocabulary = vocabulary or load_vocabulary()
    fillers, date_words = _strip_patterns(vocabulary)

    text = transcript
    if amount_span is not None:
        start, end = amount_span
        start = max(0, min(start, len(text)))
        end = max(start, min(end, len(text)))
        # Keep the words on either side apart
        text = text[:start] + " " + text[end:]

    text = fillers.sub(" ", text)
    text = date_words.sub(" ", text)
    text = _DIGITS.sub(" ", text)
    text = collapse_whitespace(text)

    if not text:
        return vocabulary.default_note

    return text[:1].upper() + text[1:]
