import logging
import math
from collections.abc import Iterable
from datetime import date
from datetime import timedelta

from contribution_chart.schemas.calendar import AggregatePayload
from contribution_chart.schemas.calendar import CalendarGrid
from contribution_chart.schemas.calendar import DayCell
from contribution_chart.schemas.calendar import MonthLabel
from contribution_chart.schemas.calendar import WeekdayLabel


logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
WEEKDAY_LABELS = (
    WeekdayLabel(label="Mon", row=1),
    WeekdayLabel(label="Wed", row=3),
    WeekdayLabel(label="Fri", row=5),
)
BUCKET_COUNT = 5


def sunday_weekday(day: date) -> int:
    """Return weekday number with Sunday as 0 and Saturday as 6."""

    return (day.weekday() + 1) % 7


def bucket_breakpoints(counts: Iterable[int]) -> tuple[int, int, int, int]:
    """Compute the upper bounds of buckets 0..3 relative to the largest count.

    The maximum never drops below 1, so an all-zero calendar still yields
    valid breakpoints and every zero lands in bucket 0.
    """

    max_count = max([*counts, 1])
    return (
        0,
        max(1, math.floor(max_count * 0.25)),
        max(1, math.floor(max_count * 0.5)),
        max(1, math.floor(max_count * 0.75)),
    )


def contribution_bucket(count: int, breakpoints: tuple[int, ...]) -> int:
    """Map a daily count to a bucket index in range 0..4."""

    for index, upper_bound in enumerate(breakpoints):
        if count <= upper_bound:
            return index
    return BUCKET_COUNT - 1


def layout_calendar(payload: AggregatePayload) -> CalendarGrid:
    """Place every day from the Sunday on/before `start` through `end` on a grid."""

    if payload.start is None or payload.end is None:
        return CalendarGrid()

    start_day = date.fromisoformat(payload.start)
    end_day = date.fromisoformat(payload.end)
    calendar_start = start_day - timedelta(days=sunday_weekday(start_day))

    total_days = (end_day - calendar_start).days + 1
    week_count = math.ceil(total_days / 7)
    breakpoints = bucket_breakpoints(payload.counts.values())

    days: list[DayCell] = []
    month_columns: dict[tuple[int, int], int] = {}
    for offset in range(total_days):
        current_day = calendar_start + timedelta(days=offset)
        column = offset // 7
        count = payload.counts.get(current_day.isoformat(), 0)
        days.append(
            DayCell(
                date=current_day,
                count=count,
                column=column,
                row=sunday_weekday(current_day),
                bucket=contribution_bucket(count, breakpoints),
            )
        )
        month_columns.setdefault((current_day.year, current_day.month), column)

    month_labels = tuple(
        MonthLabel(label=MONTH_NAMES[month - 1], column=column)
        for (_, month), column in month_columns.items()
    )

    logger.debug(
        "Calendar layout: %s days over %s weeks starting %s",
        total_days,
        week_count,
        calendar_start.isoformat(),
    )

    return CalendarGrid(
        calendar_start=calendar_start,
        end=end_day,
        total_days=total_days,
        week_count=week_count,
        breakpoints=breakpoints,
        days=tuple(days),
        month_labels=month_labels,
        weekday_labels=WEEKDAY_LABELS,
    )
