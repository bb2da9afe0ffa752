# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Expense classification for BizMetrics.

Expenses are split into two classes:

- OPERATING : recurring running costs (rent, salaries, utilities,
  marketing, ...). This is the default for every category.
- ONE_TIME  : capital / investment spend (equipment, vehicles,
  renovation, ...). These amounts are the ROI denominator.

The split is driven by a closed set of category labels
(``ONE_TIME_CATEGORIES``). A category is one-time when its case-folded
text contains one of these labels; anything else, including empty or
free-text categories, is operating. Amounts and descriptions never play a
part in the decision. New one-time labels are added explicitly through
``ExpenseClassifier.extended()`` or the ``[expenses]`` section of the
configuration file.

The module also builds per-category breakdowns and merges them across
businesses.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from .models import Expense

# Label used in breakdowns for expenses recorded without a category.
DEFAULT_CATEGORY = "Autre"

ONE_TIME_CATEGORIES: frozenset[str] = frozenset(
    {
        "capital",
        "investment",
        "investissement",
        "ponctuel",
        "equipement",
        "équipement",
        "equipment",
        "matériel",
        "véhicule",
        "vehicle",
        "machine",
        "renovation",
        "rénovation",
    }
)


class ExpenseClass(str, Enum):
    """Accounting class of an expense."""

    OPERATING = "OPERATING"
    ONE_TIME = "ONE_TIME"


def _normalize_label(label: object) -> str:
    return str(label or "").strip().casefold()


@dataclass(frozen=True)
class ExpenseClassifier:
    """
    Classifies expenses as operating or one-time from their category.

    Attributes:
        one_time_categories: Lowercase labels that mark a category as
            one-time when contained in it.
    """

    one_time_categories: frozenset[str] = ONE_TIME_CATEGORIES

    def is_one_time(self, category: object) -> bool:
        text = _normalize_label(category)
        if not text:
            return False
        return any(label in text for label in self.one_time_categories)

    def classify(self, expense: Expense) -> ExpenseClass:
        if self.is_one_time(expense.category):
            return ExpenseClass.ONE_TIME
        return ExpenseClass.OPERATING

    def extended(self, *labels: str) -> "ExpenseClassifier":
        """Return a classifier recognizing the extra one-time labels as well."""
        extra = {_normalize_label(label) for label in labels}
        extra.discard("")
        if not extra:
            return self
        return ExpenseClassifier(self.one_time_categories | frozenset(extra))


DEFAULT_CLASSIFIER = ExpenseClassifier()


def classify(
    expense: Expense, classifier: ExpenseClassifier = DEFAULT_CLASSIFIER
) -> ExpenseClass:
    """Classify one expense with the given (default) classifier."""
    return classifier.classify(expense)


def split_expenses(
    expenses: Iterable[Expense],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> tuple[list[Expense], list[Expense]]:
    """
    Partition expenses into (operating, one_time) lists.

    Every expense lands in exactly one of the two lists.
    """
    operating: list[Expense] = []
    one_time: list[Expense] = []
    for expense in expenses:
        if classifier.classify(expense) is ExpenseClass.ONE_TIME:
            one_time.append(expense)
        else:
            operating.append(expense)
    return operating, one_time


def expense_breakdown(expenses: Iterable[Expense]) -> dict[str, float]:
    """
    Total amount per expense category.

    Categories are keyed on their exact label with surrounding spaces
    removed, so "Loyer" and "loyer" stay separate entries. Expenses with an
    empty category are grouped under ``DEFAULT_CATEGORY``.
    """
    breakdown: dict[str, float] = {}
    for expense in expenses:
        category = str(expense.category or "").strip() or DEFAULT_CATEGORY
        breakdown[category] = breakdown.get(category, 0.0) + float(expense.amount)
    return breakdown


def merge_breakdowns(breakdowns: Iterable[Mapping[str, float]]) -> dict[str, float]:
    """
    Merge several category breakdowns into one.

    Amounts of the same category are summed; categories present in a single
    breakdown are kept as they are. Order follows first appearance.
    """
    merged: dict[str, float] = {}
    for breakdown in breakdowns:
        for category, amount in breakdown.items():
            merged[category] = merged.get(category, 0.0) + float(amount)
    return merged
