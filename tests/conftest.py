import pytest

from henhouse.analytics import FlockAnalytics
from henhouse.services import ExpenseService, IncomeService, ReminderService
from henhouse.storage import JSONStorage

from .factories import NOW


@pytest.fixture
def storage(tmp_path):
    return JSONStorage(tmp_path)


@pytest.fixture
def reminders(storage):
    return ReminderService(storage)


@pytest.fixture
def incomes(storage):
    return IncomeService(storage)


@pytest.fixture
def expenses(storage):
    return ExpenseService(storage)


@pytest.fixture
def analytics(reminders, incomes, expenses):
    return FlockAnalytics(reminders, incomes, expenses, clock=lambda: NOW)
