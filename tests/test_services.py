from datetime import date
from decimal import Decimal

from expense_core.aggregation import BudgetProgress
from expense_core.domain import Budget, Expense
from expense_core.services import BudgetService, ExpenseService, ReportService
from expense_core.store import MemoryStore, load_expenses, save_budgets, save_expenses


def fixed_today():
    return date(2024, 1, 28)


def make_store():
    store = MemoryStore()
    save_expenses(store, (
        Expense("e1", date(2024, 1, 15), Decimal(100), "Food", "Groceries"),
        Expense("e2", date(2024, 1, 20), Decimal(50), "Food"),
        Expense("e3", date(2023, 12, 30), Decimal(30), "Transportation"),
        Expense("e4", date(2024, 1, 21), Decimal(40), "Housing"),
    ))
    save_budgets(store, (
        Budget("b1", "Food", Decimal(100)),
        Budget("b2", "Housing", Decimal(500)),
        Budget("b3", "Savings", Decimal(0)),
    ))
    return store


def test_expense_service_persists_valid_saves_only():
    store = MemoryStore()
    svc = ExpenseService(store)
    svc.save({"date": "2024-01-02", "amount": "9", "category": "Food"})
    svc.save({"date": "2024-01-03", "amount": "nope", "category": "Food"})
    stored = load_expenses(store)
    assert len(stored) == 1
    assert stored[0].amount == Decimal(9)

    svc.delete(stored[0].id)
    assert load_expenses(store) == ()


def test_expense_service_search_totals():
    result = ExpenseService(make_store()).search("Food", "")
    assert [e.id for e in result["expenses"]] == ["e2", "e1"]
    assert result["filtered_total"] == Decimal(150)
    assert result["all_time_total"] == Decimal(220)


def test_budget_service_overview():
    view = BudgetService(make_store(), today=fixed_today).overview()
    assert view["month"] == "2024-01"
    assert view["total_budget"] == Decimal(600)
    assert view["total_spent"] == Decimal(190)
    assert view["remaining"] == Decimal(410)
    assert view["over_count"] == 1
    assert [r.progress for r in view["rows"]] == [
        BudgetProgress(100, True),
        BudgetProgress(8, False),
        BudgetProgress(0, False),
    ]


def test_budget_service_edit_and_delete():
    store = make_store()
    svc = BudgetService(store, today=fixed_today)
    svc.save({"category": "Food", "amount": "200"}, "b1")
    assert svc.overview()["over_count"] == 0
    svc.delete("b2")
    assert [b.id for b in svc.list()] == ["b1", "b3"]


def test_report_service_dashboard():
    view = ReportService(make_store(), today=fixed_today).dashboard(recent_limit=2)
    assert view["month_total"] == Decimal(190)
    assert view["total_budget"] == Decimal(600)
    assert view["remaining"] == Decimal(410)
    assert [e.id for e in view["recent"]] == ["e4", "e2"]
    assert len(view["rows"]) == 3


def test_report_service_analytics():
    view = ReportService(make_store(), today=fixed_today).analytics()
    assert view["by_month"] == [("2023-12", Decimal(30)), ("2024-01", Decimal(190))]
    assert view["by_category"] == [("Food", Decimal(150)), ("Housing", Decimal(40))]
    assert view["month_total"] == Decimal(190)
    assert view["category_count"] == 2
    assert view["top"] == ("Food", Decimal(150))


def test_empty_store_views():
    store = MemoryStore()
    dashboard = ReportService(store, today=fixed_today).dashboard()
    overview = BudgetService(store, today=fixed_today).overview()
    assert dashboard["total_budget"] == 0
    assert dashboard["remaining"] == 0
    assert overview["over_count"] == 0
    assert ReportService(store, today=fixed_today).analytics()["top"] is None


def test_views_survive_non_finite_stored_amounts():
    store = MemoryStore({
        "expensebuddy_expenses": '[{"id": "x", "date": "2024-01-05", "amount": NaN, "category": "Food"}]',
        "expensebuddy_budgets": '[{"id": "b", "category": "Food", "amount": "Infinity"}]',
    })
    dashboard = ReportService(store, today=fixed_today).dashboard()
    overview = BudgetService(store, today=fixed_today).overview()
    assert dashboard["month_total"] == 0
    assert dashboard["recent"] == []
    assert overview["rows"] == []
    assert overview["over_count"] == 0


class CountingStore(MemoryStore):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.saves = 0

    def save(self, key, records):
        self.saves += 1
        return super().save(key, records)


def test_delete_unknown_id_does_not_rewrite_store():
    store = CountingStore()
    save_expenses(store, (Expense("e1", date(2024, 1, 15), Decimal(1), "Food"),))
    save_budgets(store, (Budget("b1", "Food", Decimal(1)),))
    store.saves = 0

    ExpenseService(store).delete("missing")
    BudgetService(store, today=fixed_today).delete("missing")
    assert store.saves == 0

    ExpenseService(store).delete("e1")
    assert store.saves == 1
    assert load_expenses(store) == ()
