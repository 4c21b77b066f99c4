from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Tuple

from voice_tracker.domain.enums import Category, Direction, category_enum_for, category_from_label


@dataclass(frozen=True)
class AmountMatch:
    """An amount found in a transcript and where it was found"""
    amount: Decimal
    span: Tuple[int, int]
    text: str

    def __repr__(self):
        return f"AmountMatch({self.amount}, {self.span}, '{self.text}')"


@dataclass(frozen=True)
class ParsedTransaction:
    """Core domain model representing a transaction extracted from a transcript"""
    direction: Direction
    amount: Decimal
    category: Category
    occurred_on: date
    note: str

    def __post_init__(self):
        """Validate the record invariants"""
        if not self.amount.is_finite() or self.amount <= 0:
            raise ValueError(f"Amount must be a positive number, got {self.amount}")

        if not isinstance(self.category, category_enum_for(self.direction)):
            raise ValueError(
                f"Category {self.category} does not belong to "
                f"{self.direction.value} transactions"
            )

        if not self.note:
            raise ValueError("Note must not be empty")

    @property
    def signed_amount(self) -> Decimal:
        """Return amount with sign for net calculations"""
        return self.amount if self.direction == Direction.INCOME else -self.amount

    def with_category(self, category: Category | str) -> "ParsedTransaction":
        """
        Return a copy of this record with a different category.

        Used when the user corrects the suggested category before saving.

        Args:
            category: A category enum member or its display label

        Raises:
            ValueError: If the category is not valid for this direction
        """
        if isinstance(category, str):
            category = category_from_label(self.direction, category)
        return replace(self, category=category)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation"""
        return {
            "direction": self.direction.value,
            "amount": str(self.amount),
            "category": self.category.value,
            "occurred_on": self.occurred_on.isoformat(),
            "note": self.note,
        }

    def __repr__(self):
        sign = "+" if self.direction == Direction.INCOME else "-"
        return (
            f"ParsedTransaction({self.occurred_on}, {self.note[:30]}, "
            f"{self.category.value}, {sign}Rp{self.amount})"
        )
