from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Callable, Generic, Mapping, TypeVar

from expense_core.periods import to_date

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def parse_amount(raw) -> Either[dict, Decimal]:
    """Parse user-entered text into a positive, finite Decimal."""
    try:
        amount = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        return Left({
            "error": "invalid_amount",
            "message": f"Amount {raw!r} is not a number",
            "amount": raw,
        })
    if not amount.is_finite():
        return Left({
            "error": "invalid_amount",
            "message": f"Amount {raw!r} is not a number",
            "amount": raw,
        })
    if amount <= 0:
        return Left({
            "error": "non_positive_amount",
            "message": "Amount must be greater than zero",
            "amount": raw,
        })
    return Right(amount)


def _require_category(form: Mapping) -> Either[dict, str]:
    category = str(form.get("category") or "").strip()
    if not category:
        return Left({"error": "missing_category", "message": "Category is required"})
    return Right(category)


def _require_date(form: Mapping) -> Either[dict, object]:
    raw = form.get("date")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return Left({"error": "missing_date", "message": "Date is required"})
    try:
        return Right(to_date(raw))
    except ValueError:
        return Left({"error": "invalid_date", "message": f"Date {raw!r} is not a valid date", "date": raw})


def validate_expense_form(form: Mapping) -> Either[dict, dict]:
    """Check an expense form and return its cleaned fields.

    The result holds `date`, `amount`, `category` and `description`
    (None when blank); the id is assigned by the caller.
    """
    return _require_date(form).bind(
        lambda d: parse_amount(form.get("amount")).bind(
            lambda amount: _require_category(form).bind(
                lambda category: Right({
                    "date": d,
                    "amount": amount,
                    "category": category,
                    "description": (str(form.get("description") or "").strip() or None),
                })
            )
        )
    )


def validate_budget_form(form: Mapping) -> Either[dict, dict]:
    return _require_category(form).bind(
        lambda category: parse_amount(form.get("amount")).bind(
            lambda amount: Right({"category": category, "amount": amount})
        )
    )
