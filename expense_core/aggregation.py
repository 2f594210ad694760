"""Pure derivations over the expense and budget collections.

Nothing here mutates its input or keeps state between calls; every view
is recomputed from the full collection.
"""
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from functools import reduce
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from expense_core.domain import Budget, Expense
from expense_core.periods import DateLike, period_key

ZERO = Decimal(0)


class BudgetProgress(NamedTuple):
    percent: int
    over: bool


class BudgetRow(NamedTuple):
    budget: Budget
    spent: Decimal
    progress: BudgetProgress


def sum_amounts(expenses: Iterable[Expense]) -> Decimal:
    return reduce(lambda acc, e: acc + e.amount, expenses, ZERO)


def month_expenses(expenses: Iterable[Expense], reference_date: DateLike) -> Tuple[Expense, ...]:
    key = period_key(reference_date)
    return tuple(filter(lambda e: period_key(e.date) == key, expenses))


def group_by_month(expenses: Iterable[Expense]) -> List[Tuple[str, Decimal]]:
    """Monthly totals ordered by month key ascending (chronological)."""
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for e in expenses:
        totals[period_key(e.date)] += e.amount
    return sorted(totals.items(), key=lambda item: item[0])


def spend_by_category(expenses: Iterable[Expense], reference_date: DateLike) -> Dict[str, Decimal]:
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for e in month_expenses(expenses, reference_date):
        totals[e.category] += e.amount
    return dict(totals)


def group_by_category(expenses: Iterable[Expense], reference_date: DateLike) -> List[Tuple[str, Decimal]]:
    """Category totals for the reference month, sorted by category name."""
    return sorted(spend_by_category(expenses, reference_date).items(), key=lambda item: item[0])


def top_category(category_totals: Sequence[Tuple[str, Decimal]]) -> Optional[Tuple[str, Decimal]]:
    """Entry with the largest total; ties go to the earliest entry."""
    best: Optional[Tuple[str, Decimal]] = None
    for entry in category_totals:
        if best is None or entry[1] > best[1]:
            best = entry
    return best


def budget_progress(budget: Budget, spent: Decimal) -> BudgetProgress:
    # a cap below 1 is floored to 1 so the ratio stays finite
    ratio = Decimal(spent) / max(budget.amount, Decimal(1)) * 100
    percent = min(100, int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP)))
    return BudgetProgress(percent=percent, over=spent > budget.amount)


def total_budget(budgets: Iterable[Budget]) -> Decimal:
    return reduce(lambda acc, b: acc + b.amount, budgets, ZERO)


def remaining(budget_total: Decimal, spent_total: Decimal) -> Decimal:
    return max(budget_total - spent_total, ZERO)


def over_budget_count(budgets: Iterable[Budget], spend: Dict[str, Decimal]) -> int:
    return sum(1 for b in budgets if spend.get(b.category, ZERO) > b.amount)


def budget_rows(budgets: Iterable[Budget], spend: Dict[str, Decimal]) -> List[BudgetRow]:
    rows = []
    for b in budgets:
        spent = spend.get(b.category, ZERO)
        rows.append(BudgetRow(budget=b, spent=spent, progress=budget_progress(b, spent)))
    return rows


def recent_expenses(expenses: Iterable[Expense], limit: int) -> List[Expense]:
    # sorted() is stable, so same-day expenses keep their stored order
    ordered = sorted(expenses, key=lambda e: e.date, reverse=True)
    return ordered[: max(0, limit)]


def filter_expenses(
    expenses: Iterable[Expense], category: Optional[str] = None, query: str = ""
) -> List[Expense]:
    # blank queries match everything; otherwise the query is used verbatim
    needle = query.lower() if query.strip() else ""

    def _matches(e: Expense) -> bool:
        if category not in (None, "all") and e.category != category:
            return False
        if needle:
            return needle in f"{e.description or ''} {e.category}".lower()
        return True

    return sorted(filter(_matches, expenses), key=lambda e: e.date, reverse=True)
