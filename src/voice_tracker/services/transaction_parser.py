from datetime import date
from typing import Callable, Iterable, Optional

from voice_tracker.categorization import CategorizationEngine
from voice_tracker.domain.errors import AmountNotFoundError
from voice_tracker.domain.models import ParsedTransaction
from voice_tracker.extraction.amount import AmountExtractor
from voice_tracker.extraction.dates import resolve_date
from voice_tracker.extraction.description import clean_description
from voice_tracker.extraction.direction import detect_direction
from voice_tracker.extraction.vocabulary import Vocabulary, load_vocabulary
from voice_tracker.services.models import BatchParseResult, ParseFailure
from voice_tracker.logging_setup import get_logger

logger = get_logger(__name__)


class TransactionParser:
    """
    Turns a transcript into a ParsedTransaction.

    Runs the five stages in order:
    1. Direction (income markers)
    2. Amount (fails fast with AmountNotFoundError)
    3. Category (lexicon of the direction)
    4. Date (relative to today)
    5. Note (transcript minus amount, fillers and date words)

    Category and date read the original transcript, not the cleaned note.
    The parser keeps no state between calls.
    """

    def __init__(
        self,
        vocabulary: Optional[Vocabulary] = None,
        categorization_engine: Optional[CategorizationEngine] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.vocabulary = vocabulary or load_vocabulary()
        self.amount_extractor = AmountExtractor(self.vocabulary)
        self._categorization_engine: Optional[CategorizationEngine] = categorization_engine
        self._clock = clock

    @property
    def categorization_engine(self) -> CategorizationEngine:
        """Lazy-load categorization engine"""
        if self._categorization_engine is None:
            self._categorization_engine = CategorizationEngine(self.vocabulary)
        return self._categorization_engine

    def parse(self, transcript: str, today: Optional[date] = None) -> ParsedTransaction:
        """
        Parse a single transcript.

        Args:
            transcript: What the user said or typed
            today: The date relative phrases resolve against.
                Defaults to the parser's clock.

        Returns:
            The parsed transaction

        Raises:
            AmountNotFoundError: If the transcript has no amount

        Example:
            ```
            >>> parser = TransactionParser()
            >>> parser.parse("bayar listrik 150 ribu", today=date(2025, 3, 10))
            ParsedTransaction(2025-03-10, Listrik, Tagihan, -Rp150000)
            ```
        """
        today = today or self._clock()

        direction = detect_direction(transcript, self.vocabulary)

        try:
            amount = self.amount_extractor.extract(transcript)
        except AmountNotFoundError:
            logger.info("No amount found in '%s'", transcript)
            raise

        category = self.categorization_engine.classify(transcript, direction)
        occurred_on = resolve_date(transcript, today, self.vocabulary)
        note = clean_description(transcript, amount.span, self.vocabulary)

        transaction = ParsedTransaction(
            direction=direction,
            amount=amount.amount,
            category=category,
            occurred_on=occurred_on,
            note=note,
        )
        logger.debug("Parsed '%s' -> %r", transcript, transaction)

        return transaction

    def parse_many(
        self,
        transcripts: Iterable[str],
        today: Optional[date] = None,
    ) -> BatchParseResult:
        """
        Parse several transcripts, collecting failures instead of stopping.

        Blank transcripts are skipped.

        Args:
            transcripts: Transcripts to parse, e.g. lines of a file
            today: The date relative phrases resolve against

        Returns:
            A BatchParseResult with the records and the failures
        """
        today = today or self._clock()

        parsed = []
        failed = []
        for transcript in transcripts:
            transcript = transcript.strip()
            if not transcript:
                continue

            try:
                parsed.append(self.parse(transcript, today=today))
            except AmountNotFoundError as e:
                failed.append(ParseFailure(transcript=transcript, message=str(e)))

        return BatchParseResult(
            total=len(parsed) + len(failed),
            parsed=parsed,
            failed=failed,
        )

    def __repr__(self) -> str:
        return f"TransactionParser({self.vocabulary!r})"


_default_parser: Optional[TransactionParser] = None


def parse_transaction(transcript: str, today: Optional[date] = None) -> ParsedTransaction:
    """
    Parse a transcript with the default parser.

    Raises:
        AmountNotFoundError: If the transcript has no amount
    """
    global _default_parser
    if _default_parser is None:
        _default_parser = TransactionParser()
    return _default_parser.parse(transcript, today=today)
