"""Console interface for the chicken keeper."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional, Tuple

from henhouse.analytics import FlockAnalytics
from henhouse.charts import bar_chart, pie_chart
from henhouse.config import Settings, parse_week_start
from henhouse.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from henhouse.models import Expense, ExpenseCategory, Income, Priority, Reminder, ReminderType, RepeatOption
from henhouse.presentation import breakdown_label, format_money, month_label
from henhouse.services import ExpenseService, IncomeService, ReminderService
from henhouse.storage import JSONStorage
from henhouse.timewindows import to_local

DATETIME_FORMAT = "%Y-%m-%dT%H:%M"
BAR_WIDTH = 30


def _parse_datetime(value: str) -> datetime:
    try:
        return datetime.strptime(value, DATETIME_FORMAT)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid datetime '{value}'. Expected format YYYY-MM-DDTHH:MM."
        ) from exc


def _parse_money(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Value must be numeric") from exc
    if amount < 0:
        raise argparse.ArgumentTypeError("Value cannot be negative")
    return value


def _parse_week_start(value: str) -> int:
    try:
        return parse_week_start(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _choices(enum_cls) -> List[str]:
    return [member.value.lower() for member in enum_cls]


def _load_services(
    settings: Settings,
) -> Tuple[FlockAnalytics, ReminderService, IncomeService, ExpenseService]:
    storage = JSONStorage(settings.data_dir)
    reminders = ReminderService(storage)
    incomes = IncomeService(storage)
    expenses = ExpenseService(storage)
    analytics = FlockAnalytics(reminders, incomes, expenses, week_start=settings.week_start)
    return analytics, reminders, incomes, expenses


def _format_reminder(reminder: Reminder) -> str:
    status = "x" if reminder.is_completed else " "
    due = to_local(reminder.due_at).strftime("%Y-%m-%d %H:%M")
    lines = [
        f"[{status}] [{reminder.id}] {reminder.title}",
        f"  {reminder.type.value} | due {due} | repeat {reminder.repeat.value} | {reminder.priority.value}",
    ]
    if reminder.notes:
        lines.append(f"  Notes: {reminder.notes}")
    return "\n".join(lines)


def _format_income(income: Income) -> str:
    day = to_local(income.date).strftime("%Y-%m-%d")
    return (
        f"[{income.id}] {day} {income.eggs_sold} eggs @ {format_money(income.price_per_dozen)}/dozen"
        f" = {format_money(income.total)}"
    )


def _format_expense(expense: Expense) -> str:
    day = to_local(expense.date).strftime("%Y-%m-%d")
    return f"[{expense.id}] {day} {expense.category.value}: {format_money(expense.amount)}"


def handle_reminder(args: argparse.Namespace, service: ReminderService) -> None:
    if args.command == "add":
        reminder = service.add({
            "title": args.title,
            "type": args.type,
            "due_at": args.due_at.astimezone(),
            "repeat": args.repeat,
            "notes": args.notes,
            "priority": args.priority,
        })
        print("Reminder added:\n" + _format_reminder(reminder))
    elif args.command == "list":
        reminders = service.list()
        if args.pending:
            reminders = [reminder for reminder in reminders if not reminder.is_completed]
        if not reminders:
            print("No reminders found.")
            return
        for reminder in reminders:
            print(_format_reminder(reminder))
    elif args.command in ("done", "undo"):
        reminder = service.set_completed(args.id, args.command == "done")
        print(_format_reminder(reminder))
    elif args.command == "toggle":
        print(_format_reminder(service.toggle(args.id)))
    elif args.command == "delete":
        service.delete(args.id)
        print(f"Reminder {args.id} deleted.")


def handle_income(args: argparse.Namespace, service: IncomeService) -> None:
    if args.command == "add":
        income = service.add({
            "eggs_sold": args.eggs_sold,
            "price_per_dozen": args.price_per_dozen,
            "date": args.date.astimezone() if args.date else None,
        })
        print("Income added:\n" + _format_income(income))
    elif args.command == "list":
        incomes = service.list()
        if not incomes:
            print("No incomes found.")
            return
        for income in incomes:
            print(_format_income(income))
    elif args.command == "delete":
        service.delete(args.id)
        print(f"Income {args.id} deleted.")


def handle_expense(args: argparse.Namespace, service: ExpenseService) -> None:
    if args.command == "add":
        expense = service.add({
            "amount": args.amount,
            "category": args.category,
            "date": args.date.astimezone() if args.date else None,
        })
        print("Expense added:\n" + _format_expense(expense))
    elif args.command == "list":
        expenses = service.list()
        if not expenses:
            print("No expenses found.")
            return
        for expense in expenses:
            print(_format_expense(expense))
    elif args.command == "delete":
        service.delete(args.id)
        print(f"Expense {args.id} deleted.")


def handle_stats(args: argparse.Namespace, analytics: FlockAnalytics) -> None:
    snapshot = analytics.snapshot(args.now)
    summary = analytics.reminder_summary(args.now)
    print(f"Profit this week:     {format_money(snapshot['weekly_profit'])}")
    print(f"Eggs this week:       {snapshot['weekly_eggs_laid']}")
    print(f"Profit this month:    {format_money(snapshot['monthly_profit'])}")
    print(f"Avg dozen price:      {format_money(snapshot['average_dozen_price'])}")
    print(
        f"Tasks today:          {summary.completed_today}/{summary.due_today} done"
        f" ({summary.pending} pending overall)"
    )
    recent = analytics.recent_reminders()
    print("Recent activity:")
    if not recent:
        print("  No recent activity.")
    for reminder in recent:
        due = to_local(reminder.due_at).strftime("%Y-%m-%d %H:%M")
        status = "done" if reminder.is_completed else "pending"
        print(f"  {due} {reminder.title} ({reminder.type.value}, {status})")


def handle_performance(args: argparse.Namespace, analytics: FlockAnalytics) -> None:
    series = analytics.monthly_performance(args.now)
    chart = bar_chart(series, height=BAR_WIDTH)
    for bucket, group in zip(series, chart.groups):
        print(f"{month_label(bucket.month)} {bucket.year}")
        for segment in group.segments:
            bar = "-" if segment.negative else "#" * round(segment.height)
            print(f"  {segment.kind:<8} {format_money(getattr(bucket, segment.kind)):>10} {bar}")


def handle_breakdown(args: argparse.Namespace, analytics: FlockAnalytics) -> None:
    breakdown = analytics.expense_breakdown()
    if not breakdown:
        print("No expenses recorded.")
        return
    for item, piece in zip(breakdown, pie_chart(breakdown)):
        share = piece.span / 360 * 100
        print(f"{breakdown_label(item.category, item.total):<24} {share:5.1f}%")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chicken Keeper CLI")
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory to store JSON data (default: $CHICKEN_KEEPER_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--week-start",
        type=_parse_week_start,
        help="First day of the week, e.g. monday or sunday",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    reminder_parser = subparsers.add_parser("reminder", help="Manage flock care reminders")
    reminder_sub = reminder_parser.add_subparsers(dest="command", required=True)

    reminder_add = reminder_sub.add_parser("add", help="Add a new reminder")
    reminder_add.add_argument("title")
    reminder_add.add_argument("type", choices=_choices(ReminderType))
    reminder_add.add_argument("due_at", type=_parse_datetime)
    reminder_add.add_argument("--repeat", choices=_choices(RepeatOption), default="none")
    reminder_add.add_argument("--notes")
    reminder_add.add_argument("--priority", choices=_choices(Priority), default="medium")

    reminder_list = reminder_sub.add_parser("list", help="List reminders")
    reminder_list.add_argument("--pending", action="store_true", help="Hide completed reminders")

    for name, help_text in (
        ("done", "Mark a reminder completed"),
        ("undo", "Mark a reminder pending"),
        ("toggle", "Flip a reminder's completion"),
        ("delete", "Delete a reminder"),
    ):
        reminder_sub.add_parser(name, help=help_text).add_argument("id")

    income_parser = subparsers.add_parser("income", help="Manage egg sales")
    income_sub = income_parser.add_subparsers(dest="command", required=True)

    income_add = income_sub.add_parser("add", help="Record an egg sale")
    income_add.add_argument("eggs_sold", type=int)
    income_add.add_argument("price_per_dozen", type=_parse_money)
    income_add.add_argument("--date", type=_parse_datetime)

    income_sub.add_parser("list", help="List egg sales")
    income_sub.add_parser("delete", help="Delete an egg sale").add_argument("id")

    expense_parser = subparsers.add_parser("expense", help="Manage expenses")
    expense_sub = expense_parser.add_subparsers(dest="command", required=True)

    expense_add = expense_sub.add_parser("add", help="Record an expense")
    expense_add.add_argument("amount", type=_parse_money)
    expense_add.add_argument("category", choices=_choices(ExpenseCategory))
    expense_add.add_argument("--date", type=_parse_datetime)

    expense_sub.add_parser("list", help="List expenses")
    expense_sub.add_parser("delete", help="Delete an expense").add_argument("id")

    for name, help_text in (
        ("stats", "Show weekly and monthly figures"),
        ("performance", "Show the six-month performance chart"),
        ("breakdown", "Show all-time spend per category"),
    ):
        report = subparsers.add_parser(name, help=help_text)
        report.add_argument("--now", type=_parse_datetime, help="Evaluate as of this local time")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    if args.data_dir is not None:
        settings = replace(settings, data_dir=args.data_dir)
    if args.week_start is not None:
        settings = replace(settings, week_start=args.week_start)
    try:
        analytics, reminders, incomes, expenses = _load_services(settings)
    except OSError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1

    try:
        if args.entity == "reminder":
            handle_reminder(args, reminders)
        elif args.entity == "income":
            handle_income(args, incomes)
        elif args.entity == "expense":
            handle_expense(args, expenses)
        elif args.entity == "stats":
            handle_stats(args, analytics)
        elif args.entity == "performance":
            handle_performance(args, analytics)
        elif args.entity == "breakdown":
            handle_breakdown(args, analytics)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
