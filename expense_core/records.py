from dataclasses import replace
from typing import Mapping, Optional, Tuple, TypeVar

from expense_core.domain import Budget, Expense
from expense_core.functional import validate_budget_form, validate_expense_form
from expense_core.ids import generate_id
from expense_core.logging_utils import get_logger

LOGGER = get_logger(__name__)

R = TypeVar("R", Expense, Budget)


def prepend(records: Tuple[R, ...], record: R) -> Tuple[R, ...]:
    return (record,) + tuple(records)


def replace_by_id(records: Tuple[R, ...], record_id: str, **changes) -> Tuple[R, ...]:
    return tuple(replace(r, **changes) if r.id == record_id else r for r in records)


def remove_by_id(records: Tuple[R, ...], record_id: str) -> Tuple[R, ...]:
    return tuple(r for r in records if r.id != record_id)


def save_expense(
    expenses: Tuple[Expense, ...], form: Mapping, expense_id: Optional[str] = None
) -> Tuple[Expense, ...]:
    """Create (no id) or update (matching id) an expense from form input.

    Invalid input leaves the collection untouched.
    """
    result = validate_expense_form(form)
    if result.is_left():
        LOGGER.debug("Rejected expense form: %s", result.get_error()["message"])
        return tuple(expenses)
    fields = result.get_or_else(None)
    if expense_id:
        LOGGER.info("Updated expense %s", expense_id)
        return replace_by_id(expenses, expense_id, **fields)
    expense = Expense(id=generate_id("exp"), **fields)
    LOGGER.info("Created expense %s", expense.id)
    return prepend(expenses, expense)


def save_budget(
    budgets: Tuple[Budget, ...], form: Mapping, budget_id: Optional[str] = None
) -> Tuple[Budget, ...]:
    result = validate_budget_form(form)
    if result.is_left():
        LOGGER.debug("Rejected budget form: %s", result.get_error()["message"])
        return tuple(budgets)
    fields = result.get_or_else(None)
    if budget_id:
        LOGGER.info("Updated budget %s", budget_id)
        return replace_by_id(budgets, budget_id, **fields)
    budget = Budget(id=generate_id("bud"), **fields)
    LOGGER.info("Created budget %s", budget.id)
    return prepend(budgets, budget)


def delete_record(records: Tuple[R, ...], record_id: str) -> Tuple[R, ...]:
    kept = remove_by_id(records, record_id)
    if len(kept) < len(records):
        LOGGER.info("Deleted record %s", record_id)
    return kept
