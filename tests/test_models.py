from datetime import datetime, timezone
from decimal import Decimal

from henhouse.models import (
    Expense,
    ExpenseCategory,
    Income,
    Priority,
    Reminder,
    ReminderType,
    RepeatOption,
    isoformat_utc,
    parse_datetime,
)

WHEN = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def test_income_total_is_derived_from_eggs_and_price():
    income = Income(id="i1", date=WHEN, eggs_sold=36, price_per_dozen=Decimal("5.00"))
    assert income.total == Decimal("15.00")
    assert "total" not in income.to_dict()


def test_income_total_for_partial_dozen():
    income = Income(id="i1", date=WHEN, eggs_sold=6, price_per_dozen=Decimal("4.00"))
    assert income.total == Decimal("2.00")


def test_enums_serialise_as_display_strings():
    reminder = Reminder(
        id="r1",
        title="Vaccinate pullets",
        type=ReminderType.VACCINE,
        due_at=WHEN,
        repeat=RepeatOption.MONTHLY,
        priority=Priority.HIGH,
    )
    data = reminder.to_dict()
    assert data["type"] == "Vaccine"
    assert data["repeat"] == "Monthly"
    assert data["priority"] == "High"
    assert data["due_at"] == "2024-03-01T09:30:00Z"
    assert data["is_completed"] is False


def test_records_hydrate_from_their_dicts():
    reminder = Reminder(id="r1", title="Clean coop", type=ReminderType.CLEAN, due_at=WHEN, notes="deep")
    income = Income(id="i1", date=WHEN, eggs_sold=24, price_per_dozen=Decimal("6.00"))
    expense = Expense(id="e1", date=WHEN, amount=Decimal("12.50"), category=ExpenseCategory.BEDDING)

    assert Reminder.from_dict(reminder.to_dict()) == reminder
    assert Income.from_dict(income.to_dict()) == income
    assert Expense.from_dict(expense.to_dict()) == expense


def test_reminder_optional_fields_default_when_absent():
    reminder = Reminder.from_dict(
        {"id": "r1", "title": "Water", "type": "Water", "due_at": "2024-03-01T09:30:00Z", "extra": 1}
    )
    assert reminder.repeat is RepeatOption.NONE
    assert reminder.priority is Priority.MEDIUM
    assert reminder.notes == ""
    assert reminder.is_completed is False


def test_with_completion_keeps_identity():
    reminder = Reminder(id="r1", title="Feed", type=ReminderType.FEED, due_at=WHEN)
    done = reminder.with_completion(True)
    assert done.id == "r1"
    assert done.is_completed
    assert not reminder.is_completed


def test_datetime_helpers_use_z_suffix():
    assert isoformat_utc(WHEN) == "2024-03-01T09:30:00Z"
    assert parse_datetime("2024-03-01T09:30:00Z") == WHEN
    assert parse_datetime("2024-03-01T10:30:00+01:00") == WHEN


def test_income_total_multiplies_before_dividing():
    income = Income(id="i1", date=WHEN, eggs_sold=7, price_per_dozen=Decimal("12.00"))
    assert income.total == Decimal("7.00")
