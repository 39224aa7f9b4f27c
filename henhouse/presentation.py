"""Display metadata for domain tags, kept outside the enums themselves."""

from __future__ import annotations

import calendar
from decimal import Decimal
from typing import Dict, Optional

from .models import ExpenseCategory, Priority, ReminderType

SUNNY_YELLOW = "#FFD93D"
CORAL_RED = "#FF6B6B"
SKY_BLUE = "#4A90E2"
GRASS_GREEN = "#3DD598"
GRAY = "#8E8E93"
PLACEHOLDER_GRAY = "#8E8E934D"

REMINDER_TYPE_STYLE: Dict[ReminderType, Dict[str, str]] = {
    ReminderType.FEED: {"icon": "leaf", "color": SUNNY_YELLOW},
    ReminderType.WATER: {"icon": "drop", "color": SKY_BLUE},
    ReminderType.CLEAN: {"icon": "scissors", "color": GRASS_GREEN},
    ReminderType.HEALTH: {"icon": "heart", "color": CORAL_RED},
    ReminderType.VACCINE: {"icon": "syringe", "color": CORAL_RED},
}

PRIORITY_COLORS: Dict[Priority, str] = {
    Priority.LOW: GRASS_GREEN,
    Priority.MEDIUM: SKY_BLUE,
    Priority.HIGH: CORAL_RED,
}

CATEGORY_COLORS: Dict[ExpenseCategory, str] = {
    ExpenseCategory.FEED: SUNNY_YELLOW,
    ExpenseCategory.BEDDING: CORAL_RED,
    ExpenseCategory.HEALTHCARE: SKY_BLUE,
    ExpenseCategory.UTILITIES: GRASS_GREEN,
    ExpenseCategory.OTHER: GRAY,
}

BAR_COLORS: Dict[str, str] = {
    "income": GRASS_GREEN,
    "expenses": CORAL_RED,
    "profit": SUNNY_YELLOW,
}


def month_label(month: int) -> str:
    """Short English month name, e.g. ``Jan``."""
    return calendar.month_abbr[month]


def format_money(value: Decimal) -> str:
    return f"{value:.2f}"


def category_color(category: Optional[ExpenseCategory]) -> str:
    if category is None:
        return PLACEHOLDER_GRAY
    return CATEGORY_COLORS[category]


def breakdown_label(category: ExpenseCategory, total: Decimal) -> str:
    """Legend text such as ``Feed ($25)``; whole dollars, truncated."""
    return f"{category.value} (${int(total)})"
