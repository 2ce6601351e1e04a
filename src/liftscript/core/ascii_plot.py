"""
ASCII plotting for metric trends.

Terminal-friendly charts of one metric across an exercise's entries.
"""

from datetime import date

from .models import format_number


def _fmt_value(value: float) -> str:
    return format_number(round(value, 1))


def create_trend_plot(
    values: list[float],
    dates: list[date],
    title: str,
    width: int = 50,
    height: int = 10,
) -> str:
    """
    Create an ASCII line plot of a metric series.

    Points are spaced evenly (one per entry) and joined with staircase
    segments (╭─╯).

    Args:
        values: One metric value per entry, oldest first
        dates: Display date for each value
        title: Chart title
        width: Plot width in characters, including the y-axis labels
        height: Plot height in lines, including title and x-axis

    Returns:
        ASCII art string
    """
    if len(values) < 2:
        return "Not enough entries to chart (need 2)."

    label_width = max(len(_fmt_value(v)) for v in values) + 2
    plot_width = max(width - label_width, len(values))
    plot_height = max(height - 3, 2)

    y_min = min(values)
    y_max = max(values)
    y_range = (y_max - y_min) or 1.0

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    points: list[tuple[int, int, float]] = []
    for i, v in enumerate(values):
        x = int(i / (len(values) - 1) * (plot_width - 1))
        y = plot_height - 1 - int(((v - y_min) / y_range) * (plot_height - 1))
        points.append((x, y, v))

    def _put(x: int, row: int, ch: str) -> None:
        if 0 <= x < plot_width and 0 <= row < plot_height and grid[row][x] == " ":
            grid[row][x] = ch

    # Staircase connectors between consecutive points
    for (col1, row1, _), (col2, row2, _) in zip(points, points[1:]):
        if row1 == row2:
            for x in range(col1 + 1, col2):
                _put(x, row1, "─")
            continue

        row_dir = -1 if row2 < row1 else 1
        up = row_dir == -1
        corner_exit = "╯" if up else "╮"
        corner_entry = "╭" if up else "╰"
        n_segs = abs(row2 - row1) + 1

        for step in range(n_segs):
            row = row1 + row_dir * step
            pivot_in = col1 + (col2 - col1) * step // n_segs
            pivot_out = col1 + (col2 - col1) * (step + 1) // n_segs
            if step > 0:
                _put(pivot_in, row, corner_entry)
            start = col1 + 1 if step == 0 else pivot_in + 1
            end = col2 if step == n_segs - 1 else pivot_out
            for x in range(start, end):
                _put(x, row, "─")
            if step < n_segs - 1:
                _put(pivot_out, row, corner_exit)

    for x, y, _ in points:
        grid[y][x] = "●"

    lines = [title, "─" * (label_width + plot_width)]
    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * (y_max - y_min)
        label = _fmt_value(y_val) if i in (0, plot_height - 1) else ""
        lines.append(f"{label:>{label_width - 2}} ┤" + "".join(row))
    lines.append("─" * (label_width + plot_width))

    # First and last dates under the x-axis
    first = dates[0].strftime("%b %d")
    last = dates[-1].strftime("%b %d")
    gap = max(1, plot_width - len(first) - len(last))
    lines.append(" " * label_width + first + " " * gap + last)

    return "\n".join(lines)


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = 40,
    title: str = "",
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels) if labels else 0

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        lines.append(f"{label:>{max_label_len}} │{'█' * bar_len} {_fmt_value(value)}")

    return "\n".join(lines)
