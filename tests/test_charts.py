from datetime import datetime
from decimal import Decimal

import pytest

from henhouse.analytics import CategoryTotal, MonthlyPerformance
from henhouse.charts import bar_chart, pie_chart
from henhouse.models import ExpenseCategory


def bucket(month, income, expenses):
    income, expenses = Decimal(income), Decimal(expenses)
    return MonthlyPerformance(
        year=2024,
        month=month,
        start=datetime(2024, month, 1),
        end=datetime(2024, month, 28),
        income=income,
        expenses=expenses,
        profit=income - expenses,
    )


def test_bars_scale_against_largest_value():
    chart = bar_chart([bucket(1, "40", "10"), bucket(2, "20", "5")], height=100)

    assert chart.max_value == 40
    first = {segment.kind: segment for segment in chart.groups[0].segments}
    assert first["income"].fraction == 1.0
    assert first["income"].height == 100
    assert first["expenses"].fraction == 0.25
    assert first["profit"].fraction == 0.75
    assert chart.groups[1].key == "2024-02"


def test_empty_and_all_zero_series_fall_back_to_unit_max():
    assert bar_chart([]).max_value == 1.0
    chart = bar_chart([bucket(1, "0", "0")])
    assert chart.max_value == 1.0
    assert all(segment.height == 0 for segment in chart.groups[0].segments)


def test_negative_profit_is_clamped_and_flagged():
    chart = bar_chart([bucket(1, "10", "30")])
    profit = chart.groups[0].segments[2]

    assert profit.kind == "profit"
    assert profit.value == -20
    assert profit.fraction == 0
    assert profit.height == 0
    assert profit.negative
    assert not chart.groups[0].segments[0].negative


def test_pie_slices_are_consecutive_and_close_the_circle():
    breakdown = [
        CategoryTotal(ExpenseCategory.FEED, Decimal("25")),
        CategoryTotal(ExpenseCategory.BEDDING, Decimal("15")),
        CategoryTotal(ExpenseCategory.OTHER, Decimal("10")),
    ]
    slices = pie_chart(breakdown)

    assert [piece.category for piece in slices] == [item.category for item in breakdown]
    assert slices[0].start_angle == 0
    assert slices[0].span == pytest.approx(180)
    assert slices[1].start_angle == pytest.approx(180)
    assert slices[1].span == pytest.approx(108)
    assert slices[2].start_angle == pytest.approx(288)
    assert slices[-1].end_angle == 360
    assert sum(piece.span for piece in slices) == pytest.approx(360)


@pytest.mark.parametrize(
    "breakdown",
    [[], [CategoryTotal(ExpenseCategory.FEED, Decimal("0"))]],
)
def test_pie_without_spend_is_a_single_placeholder(breakdown):
    slices = pie_chart(breakdown)
    assert len(slices) == 1
    assert slices[0].is_placeholder
    assert slices[0].span == 360
