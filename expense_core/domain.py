from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from expense_core.periods import to_date

DEFAULT_CATEGORIES = (
    "Housing",
    "Transportation",
    "Food",
    "Utilities",
    "Healthcare",
    "Entertainment",
    "Education",
    "PersonalCare",
    "Debt",
    "Savings",
    "Business",
)

# logical collection names in the record store
STORAGE_KEYS = {
    "expenses": "expensebuddy_expenses",
    "budgets": "expensebuddy_budgets",
}


def _stored_amount(raw, positive: bool = False) -> Decimal:
    amount = Decimal(str(raw))
    if not amount.is_finite():
        raise ValueError(f"Stored amount {raw!r} is not finite")
    if positive and amount <= 0:
        raise ValueError(f"Stored amount {raw!r} must be greater than zero")
    return amount


@dataclass(frozen=True)
class Expense:
    id: str
    date: date
    amount: Decimal          # always > 0
    category: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "date": self.date.isoformat(),
            "amount": str(self.amount),
            "category": self.category,
        }
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Expense":
        return cls(
            id=str(data["id"]),
            date=to_date(data["date"]),
            amount=_stored_amount(data["amount"], positive=True),
            category=str(data["category"]),
            description=data.get("description") or None,
        )


# A monthly spending cap for one category
@dataclass(frozen=True)
class Budget:
    id: str
    category: str
    amount: Decimal

    def to_dict(self) -> dict:
        return {"id": self.id, "category": self.category, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: dict) -> "Budget":
        return cls(
            id=str(data["id"]),
            category=str(data["category"]),
            amount=_stored_amount(data["amount"]),
        )
