from calendar import monthrange
from datetime import date, timedelta
from functools import lru_cache
from typing import Optional, Pattern, Tuple

from voice_tracker.extraction.text import word_pattern
from voice_tracker.extraction.vocabulary import Vocabulary, load_vocabulary
from voice_tracker.logging_setup import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=8)
def _phrase_patterns(vocabulary: Vocabulary) -> Tuple[Pattern[str], Pattern[str]]:
    return (
        word_pattern(vocabulary.two_days_ago_phrases),
        word_pattern(vocabulary.yesterday_phrases),
    )


def _small_int(digits: str, max_digits: int) -> Optional[int]:
    """int(digits), or None past max_digits significant digits"""
    significant = digits.lstrip("0") or "0"
    if len(significant) > max_digits:
        return None
    return int(significant)


def _day_of_month(day: int, today: date) -> date:
    """
    Most recent date carrying this day-of-month.

    A day later than today's belongs to the previous month. The day is
    clamped to the length of the target month ("tanggal 31" in March
    resolves to the last day of February).
    """
    year, month = today.year, today.month
    if day > today.day:
        month -= 1
        if month == 0:
            year, month = year - 1, 12

    _, last_day = monthrange(year, month)
    return date(year, month, min(day, last_day))


def resolve_date(
    transcript: str,
    today: date,
    vocabulary: Optional[Vocabulary] = None,
) -> date:
    """
    Resolve the date phrase of a transcript against today.

    Checked in order, first match wins:
    1. "N hari (yang) lalu" -> today minus N days
    2. "kemarin lusa" / "dua hari lalu" -> today minus 2 days
    3. "kemarin" -> yesterday
    4. "tanggal D" -> most recent day D (see _day_of_month)
    5. otherwise today

    Args:
        transcript: Raw transcript
        today: The date to resolve against
        vocabulary: Optional vocabulary. Defaults to the loaded locale.

    Returns:
        A date that is never later than today
    """
    vocabulary = vocabulary or load_vocabulary()
    two_days_ago, yesterday = _phrase_patterns(vocabulary)

    resolved = today
    max_days = (today - date.min).days

    days_ago = vocabulary.days_ago_pattern.search(transcript)
    day_of_month = vocabulary.day_of_month_pattern.search(transcript)
    day = _small_int(day_of_month.group(1), 2) if day_of_month else None

    if days_ago:
        days = _small_int(days_ago.group(1), len(str(max_days)))
        resolved = today - timedelta(days=max_days if days is None else min(days, max_days))
        logger.debug("'%s' -> %s", days_ago.group(0)[:40], resolved)
    elif two_days_ago.search(transcript):
        resolved = today - timedelta(days=2)
        logger.debug("Day before yesterday -> %s", resolved)
    elif yesterday.search(transcript):
        resolved = today - timedelta(days=1)
        logger.debug("Yesterday -> %s", resolved)
    elif day is not None and 1 <= day <= 31:
        resolved = _day_of_month(day, today)
        logger.debug("'%s' -> %s", day_of_month.group(0), resolved)

    # Never in the future
    return min(resolved, today)
