import re
from typing import Iterable, Pattern

_WHITESPACE = re.compile(r"\s+")


def word_pattern(terms: Iterable[str]) -> Pattern[str]:
    """
    Compile a case-insensitive pattern matching any of the terms as whole words.

    Longer terms are tried first so that "kemarin lusa" wins over "kemarin".
    Spaces inside a term match any run of whitespace.

    Args:
        terms: Words or phrases to match

    Returns:
        Compiled pattern. With no terms, a pattern that never matches.

    Example:
        >>> word_pattern(["es", "kopi"]).search("beli es teh") is not None
        True
        >>> word_pattern(["es"]).search("beres") is None
        True
    """
    alternatives = sorted({t.strip().lower() for t in terms if t.strip()}, key=len, reverse=True)
    if not alternatives:
        return re.compile(r"(?!x)x")

    escaped = [
        r"\s+".join(re.escape(part) for part in term.split())
        for term in alternatives
    ]
    return re.compile(r"\b(?:" + "|".join(escaped) + r")\b", re.IGNORECASE)


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim"""
    return _WHITESPACE.sub(" ", text).strip()
