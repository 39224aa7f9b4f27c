"""Turn aggregated series into chart geometry (bar heights and pie angles).

No drawing happens here; surfaces receive plain numbers to render however
they like.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .analytics import CategoryTotal, MonthlyPerformance
from .models import ExpenseCategory

DEFAULT_BAR_HEIGHT = 150.0
FULL_CIRCLE = 360.0

BAR_KINDS = ("income", "expenses", "profit")


@dataclass(frozen=True)
class BarSegment:
    kind: str
    value: float
    fraction: float
    height: float
    negative: bool = False


@dataclass(frozen=True)
class BarGroup:
    key: str
    month: int
    segments: List[BarSegment]


@dataclass(frozen=True)
class BarChart:
    max_value: float
    groups: List[BarGroup]


@dataclass(frozen=True)
class PieSlice:
    category: Optional[ExpenseCategory]
    value: float
    start_angle: float
    span: float

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.span

    @property
    def is_placeholder(self) -> bool:
        return self.category is None


def bar_chart(series: Sequence[MonthlyPerformance], height: float = DEFAULT_BAR_HEIGHT) -> BarChart:
    """Scale every bucket against the largest value in the series.

    Negative values (loss-making months) are clamped to a zero-height bar and
    flagged with ``negative=True``.
    """
    values = [float(getattr(bucket, kind)) for bucket in series for kind in BAR_KINDS]
    max_value = max(values, default=0.0)
    if max_value <= 0:
        max_value = 1.0

    groups = []
    for bucket in series:
        segments = []
        for kind in BAR_KINDS:
            value = float(getattr(bucket, kind))
            fraction = max(value, 0.0) / max_value
            segments.append(BarSegment(kind, value, fraction, fraction * height, value < 0))
        groups.append(BarGroup(bucket.key, bucket.month, segments))
    return BarChart(max_value, groups)


def pie_chart(breakdown: Sequence[CategoryTotal]) -> List[PieSlice]:
    """Lay category totals out clockwise from 0 degrees in breakdown order."""
    total = sum(float(item.total) for item in breakdown)
    if total <= 0:
        return [PieSlice(None, 0.0, 0.0, FULL_CIRCLE)]

    slices: List[PieSlice] = []
    start = 0.0
    for index, item in enumerate(breakdown):
        value = float(item.total)
        if index == len(breakdown) - 1:
            # Close the circle exactly rather than accumulating float drift.
            span = FULL_CIRCLE - start
        else:
            span = FULL_CIRCLE * value / total
        slices.append(PieSlice(item.category, value, start, span))
        start += span
    return slices
