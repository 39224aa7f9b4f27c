"""Core flock-keeping logic: records, persistence and derived analytics."""

from .analytics import CategoryTotal, FlockAnalytics, MonthlyPerformance, ReminderSummary
from .charts import BarChart, PieSlice, bar_chart, pie_chart
from .config import Settings
from .exceptions import PersistenceError, RecordNotFoundError, ValidationError
from .models import Expense, ExpenseCategory, Income, Priority, Reminder, ReminderType, RepeatOption
from .services import ExpenseService, IncomeService, ReminderService
from .storage import JSONStorage, LoadResult

__all__ = [
    "BarChart",
    "CategoryTotal",
    "Expense",
    "ExpenseCategory",
    "ExpenseService",
    "FlockAnalytics",
    "Income",
    "IncomeService",
    "JSONStorage",
    "LoadResult",
    "MonthlyPerformance",
    "PersistenceError",
    "PieSlice",
    "Priority",
    "RecordNotFoundError",
    "Reminder",
    "ReminderService",
    "ReminderSummary",
    "ReminderType",
    "RepeatOption",
    "Settings",
    "ValidationError",
    "bar_chart",
    "pie_chart",
]
