"""Record store collaborator: a durable key-value mapping of collections.

Structure:
    * RecordStore - the two-operation contract the core depends on.
    * MemoryStore - process-local mapping, used in tests and demos.
    * JsonFileStore - one ``<key>.json`` file per collection.
    * load_/save_ helpers - convert between stored dicts and domain records.

Reads never raise: a missing, unreadable or malformed collection yields the
caller's default. Writes never raise either; they log the fault and report
``False`` so a caller can surface it if it wants to.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from expense_core.domain import STORAGE_KEYS, Budget, Expense
from expense_core.logging_utils import get_logger

LOGGER = get_logger(__name__)


class RecordStore(Protocol):
    def load(self, key: str, default: Any) -> Any:
        ...

    def save(self, key: str, records: Sequence[dict]) -> bool:
        ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        # values are kept serialised so a load never aliases a saved list
        self._data: Dict[str, str] = dict(initial or {})

    def load(self, key: str, default: Any) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            LOGGER.warning("Stored collection %s is malformed, using default", key)
            return default

    def save(self, key: str, records: Sequence[dict]) -> bool:
        try:
            self._data[key] = json.dumps(list(records))
        except (TypeError, ValueError) as e:
            LOGGER.warning("Could not save collection %s: %s", key, e)
            return False
        return True


class JsonFileStore:
    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str, default: Any) -> Any:
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            LOGGER.warning("Could not read %s, using default: %s", path, e)
            return default

    def save(self, key: str, records: Sequence[dict]) -> bool:
        path = self.path_for(key)
        try:
            payload = json.dumps(list(records), indent=2)
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(path)
        except (OSError, TypeError, ValueError) as e:
            LOGGER.warning("Could not write %s: %s", path, e)
            return False
        return True


def _decode(raw: Any, factory, default: Tuple) -> Tuple:
    if not isinstance(raw, list):
        return default
    try:
        return tuple(factory(item) for item in raw)
    except (KeyError, TypeError, ValueError, ArithmeticError) as e:
        LOGGER.warning("Discarding malformed stored records: %s", e)
        return default


def load_expenses(store: RecordStore, default: Tuple[Expense, ...] = ()) -> Tuple[Expense, ...]:
    return _decode(store.load(STORAGE_KEYS["expenses"], None), Expense.from_dict, default)


def save_expenses(store: RecordStore, expenses: Sequence[Expense]) -> bool:
    return store.save(STORAGE_KEYS["expenses"], [e.to_dict() for e in expenses])


def load_budgets(store: RecordStore, default: Tuple[Budget, ...] = ()) -> Tuple[Budget, ...]:
    return _decode(store.load(STORAGE_KEYS["budgets"], None), Budget.from_dict, default)


def save_budgets(store: RecordStore, budgets: Sequence[Budget]) -> bool:
    return store.save(STORAGE_KEYS["budgets"], [b.to_dict() for b in budgets])


def records_as_dicts(records: Sequence) -> List[dict]:
    return [r.to_dict() for r in records]
