"""Framework-agnostic record services for reminders, egg income and expenses."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import InvalidOperation
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar
from uuid import uuid4

from .exceptions import PersistenceError, RecordNotFoundError, ValidationError
from .models import Expense, ExpenseCategory, Income, Priority, Reminder, ReminderType, RepeatOption
from .storage import STATUS_EMPTY, JSONStorage, LoadResult
from .validators import (
    NOTES_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    parse_amount,
    parse_count,
    validate_bool,
    validate_datetime,
    validate_enum,
    validate_optional_str,
    validate_required_str,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", Reminder, Income, Expense)

REMINDERS_SLOT = "reminders"
INCOMES_SLOT = "incomes"
EXPENSES_SLOT = "expenses"


class _RecordService(Generic[R]):
    """Ordered in-memory collection with synchronous write-through persistence."""

    label = "record"

    def __init__(
        self,
        storage: JSONStorage,
        slot: str,
        decode: Callable[[Dict[str, Any]], R],
    ) -> None:
        self._storage = storage
        self._slot = slot
        self._decode = decode
        self._records: List[R] = []
        self.load_result = LoadResult(STATUS_EMPTY)
        self.load()  # Hydrate in-memory cache from persistence on construction.

    # Public API -----------------------------------------------------------
    def append(self, record: R) -> R:
        self._ensure_unique(record.id)
        self._commit(self._records + [record])
        logger.info("Appended %s %s", self.label, record.id)
        return record

    def replace(self, record_id: str, updated: R) -> R:
        if updated.id != record_id:
            raise ValidationError(f"{self.label} id cannot change ({record_id} -> {updated.id})")
        index = self._index_or_raise(record_id)
        records = list(self._records)
        records[index] = updated
        self._commit(records)
        logger.info("Replaced %s %s", self.label, record_id)
        return updated

    def delete(self, record_id: str) -> None:
        index = self._index_or_raise(record_id)
        records = list(self._records)
        del records[index]
        self._commit(records)
        logger.info("Deleted %s %s", self.label, record_id)

    def get(self, record_id: str) -> R:
        """Return a record or raise if it does not exist."""
        return self._records[self._index_or_raise(record_id)]

    def list(self) -> List[R]:
        return list(self._records)

    def __iter__(self) -> Iterator[R]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> None:
        """Load the collection from persistence, degrading to empty on undecodable data."""
        result = self._storage.load_result(self._slot)
        try:
            records = [self._decode(payload) for payload in result.records]
        except (
            KeyError, TypeError, ValueError, AttributeError, InvalidOperation, RecursionError
        ) as exc:
            logger.warning("Resetting %s to empty: undecodable record (%s)", self._slot, exc)
            result = LoadResult.corrupt(f"Undecodable {self.label}: {exc!r}")
            records = []
        self.load_result = result
        self._records = records

    # Internal helpers -----------------------------------------------------
    def _commit(self, records: List[R]) -> None:
        previous = self._records
        self._records = records
        try:
            # Persist current snapshot; storage layer handles atomic writes.
            self._storage.save(self._slot, [record.to_dict() for record in records])
        except PersistenceError:
            self._records = previous
            raise

    def _index_or_raise(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        raise RecordNotFoundError(f"{self.label.capitalize()} {record_id} not found")

    def _ensure_unique(self, record_id: str) -> None:
        if any(record.id == record_id for record in self._records):
            raise ValidationError(f"{self.label} id {record_id} already exists")


class ReminderService(_RecordService[Reminder]):
    """Manages flock care reminders; newest reminders come first."""

    label = "reminder"

    def __init__(self, storage: JSONStorage, slot: str = REMINDERS_SLOT) -> None:
        super().__init__(storage, slot, Reminder.from_dict)

    def add(self, payload: Dict[str, object]) -> Reminder:
        reminder = Reminder(**self._validate_payload(payload))
        return self.prepend(reminder)

    def prepend(self, record: Reminder) -> Reminder:
        self._ensure_unique(record.id)
        self._commit([record] + self._records)
        logger.info("Prepended reminder %s", record.id)
        return record

    def set_completed(self, reminder_id: str, is_completed: object) -> Reminder:
        flag = validate_bool(is_completed, "is_completed")
        existing = self.get(reminder_id)
        return self.replace(reminder_id, existing.with_completion(flag))

    def toggle(self, reminder_id: str) -> Reminder:
        existing = self.get(reminder_id)
        return self.replace(reminder_id, existing.with_completion(not existing.is_completed))

    def _validate_payload(self, payload: Dict[str, object]) -> Dict[str, object]:
        return {
            "id": str(uuid4()),
            "title": validate_required_str(payload.get("title"), "title", TITLE_MAX_LENGTH),
            "type": validate_enum(payload.get("type"), "type", ReminderType),
            "due_at": validate_datetime(payload.get("due_at"), "due_at"),
            "repeat": validate_enum(payload.get("repeat"), "repeat", RepeatOption, RepeatOption.NONE),
            "notes": validate_optional_str(payload.get("notes"), "notes", NOTES_MAX_LENGTH),
            "priority": validate_enum(payload.get("priority"), "priority", Priority, Priority.MEDIUM),
            "is_completed": False,
        }


class IncomeService(_RecordService[Income]):
    """Manages egg sale records."""

    label = "income"

    def __init__(self, storage: JSONStorage, slot: str = INCOMES_SLOT) -> None:
        super().__init__(storage, slot, Income.from_dict)

    def add(self, payload: Dict[str, object]) -> Income:
        return self.append(Income(**self._validate_payload(payload)))

    def _validate_payload(self, payload: Dict[str, object]) -> Dict[str, object]:
        return {
            "id": str(uuid4()),
            "date": _entry_datetime(payload.get("date")),
            "eggs_sold": parse_count(payload.get("eggs_sold"), "eggs_sold"),
            "price_per_dozen": parse_amount(payload.get("price_per_dozen"), "price_per_dozen"),
        }


class ExpenseService(_RecordService[Expense]):
    """Manages flock running costs."""

    label = "expense"

    def __init__(self, storage: JSONStorage, slot: str = EXPENSES_SLOT) -> None:
        super().__init__(storage, slot, Expense.from_dict)

    def add(self, payload: Dict[str, object]) -> Expense:
        return self.append(Expense(**self._validate_payload(payload)))

    def _validate_payload(self, payload: Dict[str, object]) -> Dict[str, object]:
        return {
            "id": str(uuid4()),
            "date": _entry_datetime(payload.get("date")),
            "amount": parse_amount(payload.get("amount"), "amount"),
            "category": validate_enum(payload.get("category"), "category", ExpenseCategory),
        }


def _entry_datetime(candidate: Optional[object]) -> datetime:
    if candidate is None:
        # Entry forms default the date picker to the current moment.
        return datetime.now(timezone.utc)
    return validate_datetime(candidate, "date")
