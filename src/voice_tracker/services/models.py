"""
Service layer models - DTOs for service operations.

These models represent the results of service operations, not domain entities.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from voice_tracker.domain.enums import Direction
from voice_tracker.domain.models import ParsedTransaction


@dataclass
class ParseFailure:
    """A transcript that could not be parsed, and why"""
    transcript: str
    message: str


@dataclass
class BatchParseResult:
    """
    Result of parsing many transcripts.

    Provides feedback about what happened:
    - How many transcripts were processed
    - Which ones became records
    - Which ones had no amount
    """
    total: int
    parsed: List[ParsedTransaction] = field(default_factory=list)
    failed: List[ParseFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Batch is successful if every transcript became a record"""
        return not self.failed

    @property
    def total_income(self) -> Decimal:
        """Total amount received"""
        return sum(
            (t.amount for t in self.parsed if t.direction == Direction.INCOME),
            Decimal(0),
        )

    @property
    def total_expense(self) -> Decimal:
        """Total amount spent"""
        return sum(
            (t.amount for t in self.parsed if t.direction == Direction.EXPENSE),
            Decimal(0),
        )

    def __str__(self) -> str:
        "Human-readable summary"
        lines = [
            f"Parsed {len(self.parsed)} of {self.total} transcripts",
            f"  Income:  Rp{self.total_income:,}",
            f"  Expense: Rp{self.total_expense:,}",
        ]

        if self.failed:
            lines.append(f"  Failed: {len(self.failed)}")

        return "\n".join(lines)

    def __post_init__(self):
        """Validate counts match lists"""
        if self.total != len(self.parsed) + len(self.failed):
            raise ValueError(
                f"Count mismatch: total={self.total} "
                f"but parsed={len(self.parsed)} and failed={len(self.failed)}"
            )
