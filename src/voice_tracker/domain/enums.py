from enum import Enum
from typing import List, Type, Union


class Direction(Enum):
    """Represents whether money is coming in or out"""
    INCOME = "income" # in
    EXPENSE = "expense" # out


class ExpenseCategory(Enum):
    """Spending categories, in lexicon order"""
    FOOD_AND_DRINK = "Makanan & Minuman"
    TRANSPORT = "Transportasi"
    SHOPPING = "Belanja"
    BILLS = "Tagihan"
    HEALTH = "Kesehatan"
    ENTERTAINMENT = "Hiburan"
    EDUCATION = "Pendidikan"
    HOUSEHOLD = "Rumah Tangga"
    COMMUNICATION = "Komunikasi"
    OTHER = "Lainnya"


class IncomeCategory(Enum):
    """Income categories, in lexicon order"""
    SALARY = "Gaji"
    BONUS = "Bonus"
    SALES = "Penjualan"
    INVESTMENT = "Investasi"
    FREELANCE = "Freelance"
    OTHER_INCOME = "Pemasukan Lain"


Category = Union[ExpenseCategory, IncomeCategory]

FALLBACK_CATEGORIES = {
    Direction.EXPENSE: ExpenseCategory.OTHER,
    Direction.INCOME: IncomeCategory.OTHER_INCOME,
}


def category_enum_for(direction: Direction) -> Type[Enum]:
    """Return the category enum that belongs to a direction."""
    if direction == Direction.INCOME:
        return IncomeCategory
    return ExpenseCategory


def categories_for(direction: Direction) -> List[Category]:
    """
    List the categories a transaction of this direction may take.

    The order is the lexicon order, with the fallback category last.

    Example:
        >>> categories_for(Direction.INCOME)[0]
        <IncomeCategory.SALARY: 'Gaji'>
    """
    return list(category_enum_for(direction))


def category_from_label(direction: Direction, label: str) -> Category:
    """
    Look up a category by its display label.

    Raises:
        ValueError: If the label is not a category of this direction
    """
    enum_cls = category_enum_for(direction)
    try:
        return enum_cls(label)
    except ValueError:
        available = ', '.join(c.value for c in enum_cls)
        raise ValueError(
            f"'{label}' is not a {direction.value} category. "
            f"Available categories: {available}"
        )
