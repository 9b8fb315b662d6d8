from html import escape

from pydantic import BaseModel
from pydantic import ConfigDict

from contribution_chart.schemas.calendar import CalendarGrid


CELL_SIZE = 12
CELL_GAP = 4
PADDING_TOP = 22
PADDING_LEFT = 36
PADDING_RIGHT = 36
PADDING = 8
FONT_FAMILY = "Arial, Helvetica, sans-serif"
FONT_SIZE = 11
SVG_NAMESPACE = "http://www.w3.org/2000/svg"


class CalendarTheme(BaseModel):
    """Colors used to draw the calendar; `palette` runs from empty to busiest."""

    model_config = ConfigDict(frozen=True)

    palette: tuple[str, str, str, str, str]
    label_color: str
    background: str


THEMES: dict[str, CalendarTheme] = {
    "light": CalendarTheme(
        palette=("#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"),
        label_color="#6a737d",
        background="transparent",
    ),
    "dark": CalendarTheme(
        palette=("#3c444d", "#033a16", "#196c2e", "#2ea043", "#56d364"),
        label_color="#f0f6fc",
        background="#0d1117",
    ),
}


def svg_dimensions(week_count: int) -> tuple[int, int]:
    width = PADDING_LEFT + PADDING + week_count * (CELL_SIZE + CELL_GAP) + PADDING_RIGHT
    height = PADDING_TOP + PADDING + 7 * (CELL_SIZE + CELL_GAP)
    return width, height


def column_x(column: int) -> int:
    return PADDING_LEFT + PADDING + column * (CELL_SIZE + CELL_GAP)


def row_y(row: int) -> int:
    return PADDING_TOP + PADDING + row * (CELL_SIZE + CELL_GAP)


def _text(x: int, y: int, label: str, fill: str, anchor: str | None = None) -> str:
    anchor_attr = f' text-anchor="{anchor}"' if anchor else ""
    return (
        f'<text x="{x}" y="{y}"{anchor_attr} font-family="{FONT_FAMILY}" '
        f'font-size="{FONT_SIZE}" fill="{fill}">{escape(label)}</text>'
    )


def render_calendar_svg(
    grid: CalendarGrid,
    accounts_label: str,
    theme: str = "light",
) -> str:
    """Serialize a calendar grid into a standalone SVG document."""

    colors = THEMES[theme]
    aria_label = escape(f"Combined contributions calendar for {accounts_label}")

    if grid.is_empty:
        return f'<svg xmlns="{SVG_NAMESPACE}" role="img" aria-label="{aria_label}"></svg>'

    width, height = svg_dimensions(grid.week_count)

    month_labels = [
        _text(column_x(month.column), max(12, PADDING_TOP - 6), month.label, colors.label_color)
        for month in grid.month_labels
    ]

    weekday_labels: list[str] = []
    for weekday in grid.weekday_labels:
        y = row_y(weekday.row) + CELL_SIZE // 2 + 4
        weekday_labels.append(
            _text(PADDING_LEFT - 6, y, weekday.label, colors.label_color, anchor="end")
        )
        weekday_labels.append(
            _text(width - PADDING_RIGHT + 6, y, weekday.label, colors.label_color, anchor="start")
        )

    rects = [
        f'<rect x="{column_x(day.column)}" y="{row_y(day.row)}" '
        f'width="{CELL_SIZE}" height="{CELL_SIZE}" rx="2" ry="2" '
        f'fill="{colors.palette[day.bucket]}">'
        f"<title>{day.count} contributions on {day.date.isoformat()}</title></rect>"
        for day in grid.days
    ]

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="{SVG_NAMESPACE}" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" role="img" aria-label="{aria_label}">',
        f'  <rect width="100%" height="100%" fill="{colors.background}"/>',
        "  <!-- Month labels -->",
        *(f"  {line}" for line in month_labels),
        "  <!-- Weekday labels -->",
        *(f"  {line}" for line in weekday_labels),
        "  <!-- Contribution squares -->",
        *(f"  {line}" for line in rects),
        "</svg>",
    ]
    return "\n".join(lines) + "\n"
