from datetime import date
from decimal import Decimal

import pytest

from expense_core.domain import DEFAULT_CATEGORIES, STORAGE_KEYS, Budget, Expense


def test_default_categories_order():
    assert DEFAULT_CATEGORIES[0] == "Housing"
    assert DEFAULT_CATEGORIES[-1] == "Business"
    assert len(DEFAULT_CATEGORIES) == 11
    assert "PersonalCare" in DEFAULT_CATEGORIES


def test_storage_keys_are_distinct():
    assert STORAGE_KEYS["expenses"] != STORAGE_KEYS["budgets"]


def test_expense_from_dict_normalises_values():
    e = Expense.from_dict({"id": "e1", "date": "2024-05-06T10:30:00", "amount": 12.5, "category": "Food", "description": ""})
    assert e == Expense("e1", date(2024, 5, 6), Decimal("12.5"), "Food", None)


def test_expense_is_immutable():
    e = Expense("e1", date(2024, 5, 6), Decimal(1), "Food")
    with pytest.raises(AttributeError):
        e.amount = Decimal(2)


def test_budget_dict_round_trip():
    b = Budget("b1", "Anything goes", Decimal("0.10"))
    assert Budget.from_dict(b.to_dict()) == b
