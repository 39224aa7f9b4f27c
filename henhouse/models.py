"""Data models for the flock-management domain."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

__all__ = [
    "ExpenseCategory",
    "Expense",
    "Income",
    "Priority",
    "Reminder",
    "ReminderType",
    "RepeatOption",
    "isoformat_utc",
    "parse_datetime",
]

EGGS_PER_DOZEN = 12


def isoformat_utc(dt: datetime) -> str:
    """Return an ISO 8601 string with trailing Z; naive datetimes are local wall-clock time."""
    # astimezone() interprets naive values as system local time.
    iso = dt.astimezone(timezone.utc).isoformat()
    # datetime.isoformat renders +00:00 for UTC; replace with the shorter Z form.
    return iso.replace("+00:00", "Z")


def parse_datetime(value: str) -> datetime:
    """Parse ISO 8601 datetime strings with optional trailing Z into UTC-aware datetime."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc)


class ReminderType(str, Enum):
    FEED = "Feed"
    WATER = "Water"
    CLEAN = "Clean"
    HEALTH = "Health"
    VACCINE = "Vaccine"


class RepeatOption(str, Enum):
    NONE = "None"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ExpenseCategory(str, Enum):
    FEED = "Feed"
    BEDDING = "Bedding"
    HEALTHCARE = "Healthcare"
    UTILITIES = "Utilities"
    OTHER = "Other"


@dataclass(frozen=True)
class Reminder:
    id: str
    title: str
    type: ReminderType
    due_at: datetime
    repeat: RepeatOption = RepeatOption.NONE
    notes: str = ""
    priority: Priority = Priority.MEDIUM
    is_completed: bool = False

    def with_completion(self, is_completed: bool) -> "Reminder":
        return replace(self, is_completed=is_completed)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the reminder to JSON-friendly natives."""
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "due_at": isoformat_utc(self.due_at),
            "repeat": self.repeat.value,
            "notes": self.notes,
            "priority": self.priority.value,
            "is_completed": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reminder":
        """Hydrate a Reminder from JSON-native data."""
        return cls(
            id=data["id"],
            title=data["title"],
            type=ReminderType(data["type"]),
            due_at=parse_datetime(data["due_at"]),
            repeat=RepeatOption(data.get("repeat", RepeatOption.NONE.value)),
            notes=data.get("notes") or "",
            priority=Priority(data.get("priority", Priority.MEDIUM.value)),
            is_completed=bool(data.get("is_completed", False)),
        )


@dataclass(frozen=True)
class Income:
    id: str
    date: datetime
    eggs_sold: int
    price_per_dozen: Decimal

    @property
    def total(self) -> Decimal:
        """Revenue for the entry; derived on every access and never persisted."""
        return Decimal(self.eggs_sold) * self.price_per_dozen / EGGS_PER_DOZEN

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the income to JSON-friendly natives."""
        return {
            "id": self.id,
            "date": isoformat_utc(self.date),
            "eggs_sold": self.eggs_sold,
            "price_per_dozen": str(self.price_per_dozen),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Income":
        """Hydrate an Income from JSON-native data."""
        return cls(
            id=data["id"],
            date=parse_datetime(data["date"]),
            eggs_sold=int(data["eggs_sold"]),
            price_per_dozen=Decimal(str(data["price_per_dozen"])),
        )


@dataclass(frozen=True)
class Expense:
    id: str
    date: datetime
    amount: Decimal
    category: ExpenseCategory

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "date": isoformat_utc(self.date),
            "amount": str(self.amount),
            "category": self.category.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data."""
        return cls(
            id=data["id"],
            date=parse_datetime(data["date"]),
            amount=Decimal(str(data["amount"])),
            category=ExpenseCategory(data["category"]),
        )
