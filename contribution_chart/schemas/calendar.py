from datetime import date

from pydantic import BaseModel
from pydantic import ConfigDict


class AggregatePayload(BaseModel):
    """Merged contribution counts with their date bounds and total."""

    start: str | None
    end: str | None
    total: int
    counts: dict[str, int]


class DayCell(BaseModel):
    """Single grid cell: one calendar day placed at a week column and weekday row."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int
    column: int
    row: int
    bucket: int


class MonthLabel(BaseModel):
    """Month abbreviation anchored above the first column the month appears in."""

    model_config = ConfigDict(frozen=True)

    label: str
    column: int


class WeekdayLabel(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    row: int


class CalendarGrid(BaseModel):
    """Sunday-aligned week x weekday layout of a contribution calendar.

    Days are stored in chronological order starting at `calendar_start`, so the
    cell at index `i` sits in column `i // 7` and row `i % 7`. The final week
    stops at the last payload date and may hold fewer than seven cells.
    """

    model_config = ConfigDict(frozen=True)

    calendar_start: date | None = None
    end: date | None = None
    total_days: int = 0
    week_count: int = 0
    breakpoints: tuple[int, ...] = ()
    days: tuple[DayCell, ...] = ()
    month_labels: tuple[MonthLabel, ...] = ()
    weekday_labels: tuple[WeekdayLabel, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.days

    @property
    def weeks(self) -> list[tuple[DayCell, ...]]:
        return [self.days[i : i + 7] for i in range(0, len(self.days), 7)]
