from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from expense_core import aggregation as agg
from expense_core.domain import Budget, Expense
from expense_core.periods import period_key
from expense_core.records import delete_record, save_budget, save_expense
from expense_core.store import (
    RecordStore,
    load_budgets,
    load_expenses,
    save_budgets,
    save_expenses,
)


class ExpenseService:
    """Facade for the expense collection; every call re-reads the store."""

    def __init__(self, store: RecordStore):
        self.store = store

    def list(self) -> Tuple[Expense, ...]:
        return load_expenses(self.store)

    def save(self, form: Mapping, expense_id: Optional[str] = None) -> Tuple[Expense, ...]:
        before = self.list()
        after = save_expense(before, form, expense_id)
        if after != before:
            save_expenses(self.store, after)
        return after

    def delete(self, expense_id: str) -> Tuple[Expense, ...]:
        before = self.list()
        after = delete_record(before, expense_id)
        if after != before:
            save_expenses(self.store, after)
        return after

    def search(self, category: Optional[str] = None, query: str = "") -> Dict[str, Any]:
        expenses = self.list()
        matched = agg.filter_expenses(expenses, category, query)
        return {
            "expenses": matched,
            "filtered_total": agg.sum_amounts(matched),
            "all_time_total": agg.sum_amounts(expenses),
        }


class BudgetService:
    """Facade for the budget collection and its monthly utilization."""

    def __init__(self, store: RecordStore, today: Callable[[], date] = date.today):
        self.store = store
        self.today = today

    def list(self) -> Tuple[Budget, ...]:
        return load_budgets(self.store)

    def save(self, form: Mapping, budget_id: Optional[str] = None) -> Tuple[Budget, ...]:
        before = self.list()
        after = save_budget(before, form, budget_id)
        if after != before:
            save_budgets(self.store, after)
        return after

    def delete(self, budget_id: str) -> Tuple[Budget, ...]:
        before = self.list()
        after = delete_record(before, budget_id)
        if after != before:
            save_budgets(self.store, after)
        return after

    def overview(self) -> Dict[str, Any]:
        budgets = self.list()
        spend = agg.spend_by_category(load_expenses(self.store), self.today())
        budget_total = agg.total_budget(budgets)
        spent_total = sum(spend.values(), Decimal(0))
        return {
            "month": period_key(self.today()),
            "total_budget": budget_total,
            "total_spent": spent_total,
            "remaining": agg.remaining(budget_total, spent_total),
            "over_count": agg.over_budget_count(budgets, spend),
            "rows": agg.budget_rows(budgets, spend),
        }


class ReportService:
    """Dashboard and analytics views derived from both collections."""

    def __init__(self, store: RecordStore, today: Callable[[], date] = date.today):
        self.store = store
        self.today = today

    def dashboard(self, recent_limit: int = 8) -> Dict[str, Any]:
        ref = self.today()
        expenses = load_expenses(self.store)
        budgets = load_budgets(self.store)
        month_total = agg.sum_amounts(agg.month_expenses(expenses, ref))
        budget_total = agg.total_budget(budgets)
        return {
            "month": period_key(ref),
            "month_total": month_total,
            "total_budget": budget_total,
            "remaining": agg.remaining(budget_total, month_total),
            "recent": agg.recent_expenses(expenses, recent_limit),
            "rows": agg.budget_rows(budgets, agg.spend_by_category(expenses, ref)),
        }

    def analytics(self) -> Dict[str, Any]:
        ref = self.today()
        expenses = load_expenses(self.store)
        by_category: List[Tuple[str, Decimal]] = agg.group_by_category(expenses, ref)
        return {
            "month": period_key(ref),
            "by_month": agg.group_by_month(expenses),
            "by_category": by_category,
            "month_total": sum((total for _, total in by_category), Decimal(0)),
            "category_count": len(by_category),
            "top": agg.top_category(by_category),
        }
