"""Derived flock metrics computed on demand from the record services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from .models import Expense, ExpenseCategory, Income, Reminder
from .services import ExpenseService, IncomeService, ReminderService
from .timewindows import (
    MONDAY,
    in_range,
    is_in_current_month,
    is_in_current_week,
    is_same_day,
    month_range,
    to_local,
)

PERFORMANCE_MONTHS = 6
RECENT_ACTIVITY_LIMIT = 3
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class MonthlyPerformance:
    year: int
    month: int
    start: datetime
    end: datetime
    income: Decimal
    expenses: Decimal
    profit: Decimal

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class CategoryTotal:
    category: ExpenseCategory
    total: Decimal


@dataclass(frozen=True)
class ReminderSummary:
    total: int
    completed: int
    pending: int
    due_today: int
    completed_today: int


def _income_total(incomes: Iterable[Income]) -> Decimal:
    return sum((income.total for income in incomes), start=ZERO)


def _expense_total(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), start=ZERO)


class FlockAnalytics:
    """Aggregates reminders, egg sales and expenses into dashboard figures.

    Nothing is cached: every call re-reads the services, so results always
    reflect the latest mutation. ``now`` defaults to the local wall clock.
    """

    def __init__(
        self,
        reminders: ReminderService,
        incomes: IncomeService,
        expenses: ExpenseService,
        *,
        week_start: int = MONDAY,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._reminders = reminders
        self._incomes = incomes
        self._expenses = expenses
        self._week_start = week_start
        self._clock = clock

    # Windows --------------------------------------------------------------
    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self._clock()

    def _week_incomes(self, now: datetime) -> List[Income]:
        return [i for i in self._incomes if is_in_current_week(i.date, now, self._week_start)]

    def _week_expenses(self, now: datetime) -> List[Expense]:
        return [e for e in self._expenses if is_in_current_week(e.date, now, self._week_start)]

    def _month_incomes(self, now: datetime) -> List[Income]:
        return [i for i in self._incomes if is_in_current_month(i.date, now)]

    def _month_expenses(self, now: datetime) -> List[Expense]:
        return [e for e in self._expenses if is_in_current_month(e.date, now)]

    # Scalar metrics -------------------------------------------------------
    def weekly_income(self, now: Optional[datetime] = None) -> Decimal:
        return _income_total(self._week_incomes(self._now(now)))

    def weekly_profit(self, now: Optional[datetime] = None) -> Decimal:
        now = self._now(now)
        return _income_total(self._week_incomes(now)) - _expense_total(self._week_expenses(now))

    def weekly_eggs_laid(self, now: Optional[datetime] = None) -> int:
        return sum(income.eggs_sold for income in self._week_incomes(self._now(now)))

    def monthly_income(self, now: Optional[datetime] = None) -> Decimal:
        return _income_total(self._month_incomes(self._now(now)))

    def monthly_expenses(self, now: Optional[datetime] = None) -> Decimal:
        return _expense_total(self._month_expenses(self._now(now)))

    def monthly_eggs_sold(self, now: Optional[datetime] = None) -> int:
        return sum(income.eggs_sold for income in self._month_incomes(self._now(now)))

    def monthly_profit(self, now: Optional[datetime] = None) -> Decimal:
        now = self._now(now)
        return self.monthly_income(now) - self.monthly_expenses(now)

    def average_dozen_price(self, now: Optional[datetime] = None) -> Decimal:
        """Income per dozen sold this month; zero when nothing (or no eggs) was sold."""
        incomes = self._month_incomes(self._now(now))
        total_eggs = sum(income.eggs_sold for income in incomes)
        if not incomes or total_eggs == 0:
            return ZERO
        # Same as income / (eggs / 12), without dividing by a repeating twelfth.
        weighted = sum(
            (Decimal(income.eggs_sold) * income.price_per_dozen for income in incomes), start=ZERO
        )
        return weighted / total_eggs

    # Series ---------------------------------------------------------------
    def monthly_performance(self, now: Optional[datetime] = None) -> List[MonthlyPerformance]:
        """Six monthly buckets, oldest first, ending with the current month."""
        now = self._now(now)
        incomes = self._incomes.list()
        expenses = self._expenses.list()
        series: List[MonthlyPerformance] = []
        for months_ago in range(PERFORMANCE_MONTHS - 1, -1, -1):
            start, end = month_range(months_ago, now)
            income = _income_total(i for i in incomes if in_range(i.date, start, end))
            spent = _expense_total(e for e in expenses if in_range(e.date, start, end))
            series.append(
                MonthlyPerformance(
                    year=start.year,
                    month=start.month,
                    start=start,
                    end=end,
                    income=income,
                    expenses=spent,
                    profit=income - spent,
                )
            )
        return series

    def expense_breakdown(self) -> List[CategoryTotal]:
        """All-time spend per category in declared category order, skipping unused ones."""
        totals: Dict[ExpenseCategory, Decimal] = {}
        for expense in self._expenses:
            totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount
        return [
            CategoryTotal(category, totals[category])
            for category in ExpenseCategory
            if category in totals
        ]

    # Reminders ------------------------------------------------------------
    def reminder_summary(self, now: Optional[datetime] = None) -> ReminderSummary:
        now = self._now(now)
        reminders = self._reminders.list()
        completed = sum(1 for r in reminders if r.is_completed)
        today = [r for r in reminders if is_same_day(r.due_at, now)]
        return ReminderSummary(
            total=len(reminders),
            completed=completed,
            pending=len(reminders) - completed,
            due_today=len(today),
            completed_today=sum(1 for r in today if r.is_completed),
        )

    def recent_reminders(self, limit: int = RECENT_ACTIVITY_LIMIT) -> List[Reminder]:
        """Reminders with the latest due time first; ties keep collection order."""
        if limit < 0:
            raise ValueError(f"limit cannot be negative, got {limit}")
        ordered = sorted(self._reminders.list(), key=lambda r: to_local(r.due_at), reverse=True)
        return ordered[:limit]

    def snapshot(self, now: Optional[datetime] = None) -> Dict[str, object]:
        """Every scalar metric evaluated against a single ``now``."""
        now = self._now(now)
        return {
            "weekly_income": self.weekly_income(now),
            "weekly_profit": self.weekly_profit(now),
            "weekly_eggs_laid": self.weekly_eggs_laid(now),
            "monthly_income": self.monthly_income(now),
            "monthly_expenses": self.monthly_expenses(now),
            "monthly_profit": self.monthly_profit(now),
            "average_dozen_price": self.average_dozen_price(now),
        }
